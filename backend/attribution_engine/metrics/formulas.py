"""
Metric Formulas
===============

Pure KPI calculations with explicit zero-denominator rules.

Every function branches on the degenerate case itself instead of relying on
a generic safe-divide, because the rules differ per metric:

    roi     revenue / spend       spend == 0: +inf if revenue > 0, else 0
    cpl     spend / leads         leads == 0: 0
    ctr     clicks / impr * 100   impressions == 0: 0
    profit  revenue - spend       never degenerate

None of these ever returns NaN.

References:
- attribution_engine/services/performance_ranker.py: per-row and summary KPIs
- attribution_engine/services/metrics_aggregator.py: daily rows
"""

from __future__ import annotations

import math


def compute_profit(revenue: float, spend: float) -> float:
    return revenue - spend


def compute_roi(revenue: float, spend: float) -> float:
    """Revenue per unit of spend.

    A zero-cost entity that produced revenue has unbounded return and sorts
    above every finite ROI. No spend and no revenue is neutral (0).
    """
    if spend > 0:
        return revenue / spend
    if revenue > 0:
        return math.inf
    return 0.0


def compute_cpl(spend: float, leads: float) -> float:
    """Cost per lead; 0 when there are no leads."""
    if leads > 0:
        return spend / leads
    return 0.0


def compute_ctr(clicks: float, impressions: float) -> float:
    """Click-through rate as a percentage; 0 when there are no impressions."""
    if impressions > 0:
        return clicks / impressions * 100
    return 0.0
