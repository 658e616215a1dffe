"""Exceptions raised for caller contract violations.

The engine degrades silently on inconsistent historical data (orphaned
creatives, missing dates, zero denominators). These exceptions cover the
remaining case: the caller handed us something we cannot interpret at all.
"""


class AttributionEngineError(Exception):
    """Base class for engine errors."""


class InvalidPeriodError(AttributionEngineError, ValueError):
    """Unknown period tag, or a relative window of fewer than one day."""

    def __init__(self, tag: str, reason: str = "unknown period tag"):
        self.tag = tag
        self.reason = reason
        super().__init__(f"Invalid period '{tag}': {reason}")
