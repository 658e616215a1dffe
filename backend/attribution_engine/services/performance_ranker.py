"""
Performance Ranker
==================

WHAT:
    Merges aggregated cost/volume totals with attributed revenue, derives
    KPIs (profit, ROI, CPL, CTR) and orders entities for the leaderboard.

WHY:
    Campaign and creative leaderboards must agree on one ordering rule:
    ROI descending (unbounded ROI first), ties broken by profit descending,
    remaining ties kept in input order.

NOTES:
    - Only keys present in the totals map are ranked unless
      include_revenue_only is set, which also ranks entities that have
      revenue but no recorded cost/volume.
    - top_k() slices after the full sort. summarize() always runs over all
      rows so summary cards are not limited to the leaderboard.

REFERENCES:
    - attribution_engine/metrics/formulas.py: degenerate-value rules
    - attribution_engine/services/marketing_report.py: full pipeline
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Sequence

from attribution_engine.metrics.formulas import compute_cpl, compute_ctr, compute_profit, compute_roi
from attribution_engine.services.metrics_aggregator import Totals

logger = logging.getLogger(__name__)

NameResolver = Callable[[str], Optional[str]]

DEFAULT_UNKNOWN_LABEL = "Unknown"


@dataclass(frozen=True)
class RankingRow:
    id: str
    name: str
    spend: float
    revenue: float
    profit: float
    roi: float
    cpl: float
    ctr: float
    leads: int
    qualified_leads: int
    impressions: int = 0
    clicks: int = 0


@dataclass(frozen=True)
class SummaryTotals:
    """Aggregate of every ranked row, for the dashboard summary cards."""

    spend: float = 0.0
    revenue: float = 0.0
    profit: float = 0.0
    roi: float = 0.0
    leads: int = 0
    qualified_leads: int = 0
    impressions: int = 0
    clicks: int = 0
    cpl: float = 0.0
    ctr: float = 0.0
    count: int = 0


def build_row(entity_id: str, name: str, totals: Totals, revenue: float) -> RankingRow:
    return RankingRow(
        id=entity_id,
        name=name,
        spend=totals.spend,
        revenue=revenue,
        profit=compute_profit(revenue, totals.spend),
        roi=compute_roi(revenue, totals.spend),
        cpl=compute_cpl(totals.spend, totals.leads),
        ctr=compute_ctr(totals.clicks, totals.impressions),
        leads=totals.leads,
        qualified_leads=totals.qualified_leads,
        impressions=totals.impressions,
        clicks=totals.clicks,
    )


def sort_rows(rows: Sequence[RankingRow]) -> List[RankingRow]:
    """ROI descending, then profit descending; stable for full ties."""
    return sorted(rows, key=lambda row: (row.roi, row.profit), reverse=True)


def rank(
    totals: Mapping[str, Totals],
    revenue: Mapping[str, float],
    name_resolver: NameResolver,
    include_revenue_only: bool = False,
    unknown_label: str = DEFAULT_UNKNOWN_LABEL,
) -> List[RankingRow]:
    """
    Build and sort ranking rows.

    Args:
        totals: Cost/volume per entity id (creative or campaign).
        revenue: Attributed revenue per entity id; missing ids count as 0.
        name_resolver: id -> display name, or None when unknown.
        include_revenue_only: Also rank ids present only in `revenue`.
        unknown_label: Name shown for ids the resolver cannot name.

    Returns:
        A new list of RankingRow in ranking order. Inputs are not modified.

    Example:
        >>> rows = rank({"c1": Totals(spend=100)}, {"c1": 250.0}, lambda _id: "Spring")
        >>> rows[0].roi, rows[0].profit
        (2.5, 150.0)
    """
    keys = list(totals.keys())
    if include_revenue_only:
        keys.extend(k for k in revenue.keys() if k not in totals)

    rows = []
    for entity_id in keys:
        name = name_resolver(entity_id) or unknown_label
        rows.append(build_row(entity_id, name, totals.get(entity_id, Totals()), float(revenue.get(entity_id, 0.0))))

    ranked = sort_rows(rows)
    logger.debug(f"[RANKING] Ranked {len(ranked)} entities")
    return ranked


def top_k(rows: Sequence[RankingRow], k: int) -> List[RankingRow]:
    """First k rows of an already sorted ranking."""
    if k <= 0:
        return []
    return list(rows[:k])


def summarize(rows: Sequence[RankingRow]) -> SummaryTotals:
    """Totals across all rows; zero rows give all-zero figures, never NaN."""
    spend = sum(row.spend for row in rows)
    revenue = sum(row.revenue for row in rows)
    leads = sum(row.leads for row in rows)
    impressions = sum(row.impressions for row in rows)
    clicks = sum(row.clicks for row in rows)
    return SummaryTotals(
        spend=float(spend),
        revenue=float(revenue),
        profit=compute_profit(float(revenue), float(spend)),
        roi=compute_roi(float(revenue), float(spend)),
        leads=leads,
        qualified_leads=sum(row.qualified_leads for row in rows),
        impressions=impressions,
        clicks=clicks,
        cpl=compute_cpl(float(spend), leads),
        ctr=compute_ctr(clicks, impressions),
        count=len(rows),
    )


def summarize_totals(totals: Totals, revenue: float, count: int = 0) -> SummaryTotals:
    """Summary figures for a pre-summed selection of `count` records."""
    row = build_row("", "", totals, revenue)
    return SummaryTotals(
        spend=row.spend,
        revenue=row.revenue,
        profit=row.profit,
        roi=row.roi,
        leads=row.leads,
        qualified_leads=row.qualified_leads,
        impressions=row.impressions,
        clicks=row.clicks,
        cpl=row.cpl,
        ctr=row.ctr,
        count=count,
    )
