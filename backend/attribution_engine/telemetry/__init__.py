"""
Telemetry Module
================

Observability for the reporting API.

Components:
- sentry.py: Error tracking

Environment Variables:
- SENTRY_DSN: Sentry project DSN
- LOG_LEVEL: Root log level (default INFO)

Usage:
    from attribution_engine.telemetry import init_observability

    init_observability(settings)
"""

import logging

from attribution_engine.telemetry.sentry import (
    capture_exception,
    init_sentry,
)


def init_observability(settings) -> dict:
    """
    Configure logging and error tracking.

    Returns:
        Dict with status of each tool: {"sentry": True/False}
    """
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    return {
        "sentry": init_sentry(settings.SENTRY_DSN, settings.ENVIRONMENT),
    }


__all__ = [
    "init_observability",
    "init_sentry",
    "capture_exception",
]
