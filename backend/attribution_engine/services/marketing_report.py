"""
Marketing Report Service
========================

Single entry point for the marketing analytics screens.

WHAT: Runs the full pipeline over one snapshot
WHY: Ranking, summary cards, daily table and frustration view must all use
     the same resolved range and the same hierarchy
HOW: resolve period → filter → aggregate + attribute → rank/summarize

Pipeline:
    PeriodSelection ──resolve──▶ DateRange
    daily metrics ──aggregate──▶ Totals per key ─┐
    sales ─────────attribute───▶ revenue per key ┴─rank──▶ RankingRow[] ─▶ top-K / summary

Design Principles:
- Pure function over an in-memory snapshot; nothing is mutated or cached
- The hierarchy index is rebuilt on every call
- Inconsistent history degrades silently (see module docs of each step)

Usage:
    >>> service = MarketingReportService()
    >>> report = service.get_ranking(
    ...     snapshot,
    ...     PeriodSelection(tag="last_7_days"),
    ...     mode=RankingMode.campaign,
    ...     reference_date=date(2024, 3, 15),
    ... )
    >>> report.top[0].name
    'Spring Launch'

References:
- attribution_engine/services/metrics_aggregator.py
- attribution_engine/services/revenue_attribution.py
- attribution_engine/services/performance_ranker.py
- attribution_engine/services/frustration_analyzer.py
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Iterable, List, Optional

from attribution_engine.dsl.date_range import DateRange
from attribution_engine.dsl.hierarchy import HierarchyIndex
from attribution_engine.dsl.periods import PeriodSelection
from attribution_engine.models import MarketingSnapshot
from attribution_engine.services import (
    frustration_analyzer,
    metrics_aggregator,
    performance_ranker,
    revenue_attribution,
)
from attribution_engine.services.frustration_analyzer import FrustrationReport
from attribution_engine.services.metrics_aggregator import DailyRow
from attribution_engine.services.performance_ranker import RankingRow, SummaryTotals

if TYPE_CHECKING:
    from attribution_engine.deps import Settings

logger = logging.getLogger(__name__)


class RankingMode(str, enum.Enum):
    """Which key space the leaderboard ranks."""

    creative = "creative"
    campaign = "campaign"


@dataclass(frozen=True)
class RankingReport:
    date_range: DateRange
    mode: RankingMode
    rows: List[RankingRow]
    top: List[RankingRow]
    summary: SummaryTotals


@dataclass(frozen=True)
class SelectionSummary:
    date_range: DateRange
    summary: SummaryTotals


@dataclass(frozen=True)
class DailyReport:
    date_range: DateRange
    rows: List[DailyRow]


@dataclass(frozen=True)
class FrustrationResult:
    date_range: DateRange
    report: FrustrationReport


def summarize_selection(
    snapshot: MarketingSnapshot,
    date_range: DateRange,
    campaign_id: Optional[str] = None,
    creative_ids: Optional[Iterable[str]] = None,
) -> SummaryTotals:
    """Summary-card totals for the records matching range, campaign and creatives."""
    hierarchy = HierarchyIndex.from_snapshot(snapshot)
    creative_ids = list(creative_ids or [])

    records = metrics_aggregator.select_records(snapshot.daily_metrics, date_range, campaign_id, creative_ids)
    totals = metrics_aggregator.sum_totals(records)

    if creative_ids:
        revenue_creatives = creative_ids
    elif campaign_id:
        revenue_creatives = hierarchy.creatives_of_campaign(campaign_id)
    else:
        revenue_creatives = hierarchy.creative_ids()
    revenue = revenue_attribution.attribute_to_creatives(snapshot.sales, date_range, revenue_creatives)

    return performance_ranker.summarize_totals(totals, revenue, count=len(records))


class MarketingReportService:
    """
    Marketing attribution and ranking pipeline.

    Holds display/ranking options only; every call takes its own snapshot
    and period, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        top_k: int = 5,
        unknown_label: str = performance_ranker.DEFAULT_UNKNOWN_LABEL,
        unspecified_label: str = frustration_analyzer.DEFAULT_UNSPECIFIED_LABEL,
        include_revenue_only: bool = False,
    ):
        self.top_k = top_k
        self.unknown_label = unknown_label
        self.unspecified_label = unspecified_label
        self.include_revenue_only = include_revenue_only

    @classmethod
    def from_settings(cls, settings: "Settings") -> "MarketingReportService":
        return cls(
            top_k=settings.DEFAULT_TOP_K,
            unknown_label=settings.UNKNOWN_NAME_LABEL,
            unspecified_label=settings.UNSPECIFIED_REASON_LABEL,
            include_revenue_only=settings.RANK_REVENUE_ONLY_ENTITIES,
        )

    def get_ranking(
        self,
        snapshot: MarketingSnapshot,
        period: PeriodSelection,
        mode: RankingMode = RankingMode.creative,
        reference_date: Optional[date] = None,
        top_k: Optional[int] = None,
    ) -> RankingReport:
        """
        Rank creatives or campaigns over the selected period.

        Args:
            snapshot: Hierarchy, daily metrics and sales to compute over
            period: Period selection as picked in the filter control
            mode: creative or campaign leaderboard
            reference_date: The caller's local "today"
            top_k: Leaderboard size (defaults to the service setting)

        Returns:
            RankingReport with every row, the top-K slice, and a summary
            over all rows.
        """
        date_range = period.resolve(reference_date)
        hierarchy = HierarchyIndex.from_snapshot(snapshot)
        logger.info(f"[MARKETING_REPORT] Ranking {mode.value}s over {date_range}")

        if mode == RankingMode.campaign:
            totals = metrics_aggregator.aggregate_by_campaign(snapshot.daily_metrics, date_range, hierarchy)
            revenue = revenue_attribution.attribute_by_campaign(snapshot.sales, date_range, hierarchy)
            name_resolver = hierarchy.campaign_name
        else:
            totals = metrics_aggregator.aggregate_by_creative(snapshot.daily_metrics, date_range)
            revenue = revenue_attribution.attribute_by_creative(snapshot.sales, date_range)
            name_resolver = hierarchy.creative_name

        rows = performance_ranker.rank(
            totals,
            revenue,
            name_resolver,
            include_revenue_only=self.include_revenue_only,
            unknown_label=self.unknown_label,
        )
        k = self.top_k if top_k is None else top_k
        summary = performance_ranker.summarize(rows)
        logger.info(
            f"[MARKETING_REPORT] {len(rows)} rows, spend={summary.spend:.2f} revenue={summary.revenue:.2f}"
        )
        return RankingReport(
            date_range=date_range,
            mode=mode,
            rows=rows,
            top=performance_ranker.top_k(rows, k),
            summary=summary,
        )

    def get_selection_summary(
        self,
        snapshot: MarketingSnapshot,
        period: PeriodSelection,
        campaign_id: Optional[str] = None,
        creative_ids: Optional[Iterable[str]] = None,
        reference_date: Optional[date] = None,
    ) -> SelectionSummary:
        """
        Summary cards for the metrics table selection.

        Revenue counts delivered sales whose creative is in the effective
        selection: the explicit creative ids, else the campaign's creatives,
        else every creative in the hierarchy. Sales on creatives that no
        longer exist never count here.
        """
        date_range = period.resolve(reference_date)
        return SelectionSummary(
            date_range=date_range,
            summary=summarize_selection(snapshot, date_range, campaign_id, creative_ids),
        )

    def get_daily(
        self,
        snapshot: MarketingSnapshot,
        period: PeriodSelection,
        campaign_id: Optional[str] = None,
        creative_ids: Optional[Iterable[str]] = None,
        reference_date: Optional[date] = None,
    ) -> DailyReport:
        """Daily metrics table for the selection, newest day first."""
        date_range = period.resolve(reference_date)
        hierarchy = HierarchyIndex.from_snapshot(snapshot)
        rows = metrics_aggregator.daily_rows(
            snapshot.daily_metrics,
            date_range,
            snapshot.sales,
            hierarchy,
            campaign_id=campaign_id,
            creative_ids=creative_ids,
        )
        return DailyReport(date_range=date_range, rows=rows)

    def get_frustration(
        self,
        snapshot: MarketingSnapshot,
        period: PeriodSelection,
        reference_date: Optional[date] = None,
    ) -> FrustrationResult:
        """Lost-sale breakdown by reason over the scheduled date."""
        date_range = period.resolve(reference_date)
        report = frustration_analyzer.analyze(
            snapshot.sales,
            snapshot.frustration_reasons,
            date_range,
            unspecified_label=self.unspecified_label,
        )
        return FrustrationResult(date_range=date_range, report=report)
