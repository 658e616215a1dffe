"""KPI formulas shared by the ranking, summary and daily views."""

from attribution_engine.metrics.formulas import (
    compute_cpl,
    compute_ctr,
    compute_profit,
    compute_roi,
)

__all__ = ["compute_cpl", "compute_ctr", "compute_profit", "compute_roi"]
