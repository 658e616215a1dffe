"""
Metrics Aggregator
==================

WHAT:
    Folds raw daily performance records into per-creative and per-campaign
    totals (spend, impressions, clicks, leads, qualified leads) for a range,
    and builds the day-by-day metrics table.

WHY:
    The ranking needs one cost/volume bucket per entity. Records are partial
    days, so several may exist for the same (date, creative) pair; they are
    summed, never deduplicated.

NOTES:
    - Folding is plain addition, so input order never changes the result.
    - Records with no date are never in a bounded range.
    - Campaign buckets key on the record's own campaign_id. Records without
      one still count at the creative level.

REFERENCES:
    - attribution_engine/dsl/date_range.py: in_range()
    - attribution_engine/services/performance_ranker.py: consumes Totals maps
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Set, Tuple

from attribution_engine.dsl.date_range import DateRange, in_range, to_calendar_date
from attribution_engine.dsl.hierarchy import HierarchyIndex
from attribution_engine.metrics.formulas import compute_cpl, compute_ctr, compute_profit, compute_roi
from attribution_engine.models import DailyMetricRecord, SaleEvent, SaleStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Totals:
    """Summed cost and volume figures for one entity."""

    spend: float = 0.0
    impressions: int = 0
    clicks: int = 0
    leads: int = 0
    qualified_leads: int = 0

    @classmethod
    def from_record(cls, record: DailyMetricRecord) -> "Totals":
        return cls(
            spend=float(record.spend or 0),
            impressions=int(record.impressions or 0),
            clicks=int(record.clicks or 0),
            leads=int(record.leads or 0),
            qualified_leads=int(record.qualified_leads or 0),
        )

    def __add__(self, other: "Totals") -> "Totals":
        return Totals(
            spend=self.spend + other.spend,
            impressions=self.impressions + other.impressions,
            clicks=self.clicks + other.clicks,
            leads=self.leads + other.leads,
            qualified_leads=self.qualified_leads + other.qualified_leads,
        )


def filter_records(records: Iterable[DailyMetricRecord], date_range: DateRange) -> List[DailyMetricRecord]:
    """Records whose date falls in the range."""
    return [r for r in records if in_range(r.date, date_range)]


def sum_totals(records: Iterable[DailyMetricRecord]) -> Totals:
    totals = Totals()
    for record in records:
        totals = totals + Totals.from_record(record)
    return totals


def aggregate_by_creative(
    records: Iterable[DailyMetricRecord],
    date_range: DateRange,
) -> Dict[str, Totals]:
    """Sum in-range records per creative id."""
    buckets: Dict[str, Totals] = {}
    for record in filter_records(records, date_range):
        buckets[record.creative_id] = buckets.get(record.creative_id, Totals()) + Totals.from_record(record)
    return buckets


def aggregate_by_campaign(
    records: Iterable[DailyMetricRecord],
    date_range: DateRange,
    hierarchy: Optional[HierarchyIndex] = None,
) -> Dict[str, Totals]:
    """
    Sum in-range records per campaign id.

    The bucket is always the record's own campaign_id; the hierarchy is not
    used to fill it in. When a hierarchy is given it is only used to log
    records whose campaign_id disagrees with where the creative lives now
    (e.g. a creative moved after the metrics were recorded).
    """
    buckets: Dict[str, Totals] = {}
    skipped = 0
    drifted = 0
    for record in filter_records(records, date_range):
        if not record.campaign_id:
            skipped += 1
            continue
        if hierarchy is not None:
            current = hierarchy.campaign_of(record.creative_id)
            if current is not None and current != record.campaign_id:
                drifted += 1
        buckets[record.campaign_id] = buckets.get(record.campaign_id, Totals()) + Totals.from_record(record)

    if skipped:
        logger.debug(f"[METRICS] {skipped} records without campaign_id left out of campaign totals")
    if drifted:
        logger.debug(f"[METRICS] {drifted} records carry a campaign_id that differs from the current hierarchy")
    return buckets


# ---------------------------------------------------------------------------
# Daily metrics table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DailyRow:
    """One line of the daily metrics table."""

    id: Optional[str]
    date: Optional[date]
    campaign_id: Optional[str]
    campaign_name: str
    ad_set_id: Optional[str]
    ad_set_name: str
    creative_id: str
    creative_name: str
    spend: float
    impressions: int
    clicks: int
    leads: int
    qualified_leads: int
    ctr: float
    cpl: float
    revenue: float
    profit: float
    roi: float


def select_records(
    records: Iterable[DailyMetricRecord],
    date_range: DateRange,
    campaign_id: Optional[str] = None,
    creative_ids: Optional[Iterable[str]] = None,
) -> List[DailyMetricRecord]:
    """In-range records matching the optional campaign and creative filters.

    An empty creative selection means "all creatives".
    """
    wanted: Optional[Set[str]] = set(creative_ids) if creative_ids else None
    selected = []
    for record in records:
        if campaign_id and record.campaign_id != campaign_id:
            continue
        if wanted is not None and record.creative_id not in wanted:
            continue
        if not in_range(record.date, date_range):
            continue
        selected.append(record)
    return selected


def _same_day_revenue(sales: Iterable[SaleEvent]) -> Dict[Tuple[str, date], float]:
    revenue: Dict[Tuple[str, date], float] = {}
    for sale in sales:
        if sale.status != SaleStatus.delivered or not sale.creative_id:
            continue
        day = to_calendar_date(sale.delivery_date)
        if day is None:
            continue
        key = (sale.creative_id, day)
        revenue[key] = revenue.get(key, 0.0) + float(sale.value)
    return revenue


def daily_rows(
    records: Iterable[DailyMetricRecord],
    date_range: DateRange,
    sales: Iterable[SaleEvent],
    hierarchy: HierarchyIndex,
    campaign_id: Optional[str] = None,
    creative_ids: Optional[Iterable[str]] = None,
) -> List[DailyRow]:
    """
    Build the daily metrics table, newest day first.

    Each row carries the record's own figures, its CTR and CPL, the revenue
    of Delivered sales on the same creative delivered that same day, and the
    day's profit and ROI against that revenue.
    Records from the same day keep their input order.
    """
    revenue_by_day = _same_day_revenue(sales)
    rows: List[DailyRow] = []
    for record in select_records(records, date_range, campaign_id, creative_ids):
        day = to_calendar_date(record.date)
        totals = Totals.from_record(record)
        revenue = revenue_by_day.get((record.creative_id, day), 0.0) if day else 0.0
        rows.append(
            DailyRow(
                id=record.id,
                date=day,
                campaign_id=record.campaign_id,
                campaign_name=(record.campaign_id and hierarchy.campaign_name(record.campaign_id)) or "?",
                ad_set_id=record.ad_set_id,
                ad_set_name=(record.ad_set_id and hierarchy.ad_set_name(record.ad_set_id)) or "?",
                creative_id=record.creative_id,
                creative_name=hierarchy.creative_name(record.creative_id) or "Removed",
                spend=totals.spend,
                impressions=totals.impressions,
                clicks=totals.clicks,
                leads=totals.leads,
                qualified_leads=totals.qualified_leads,
                ctr=compute_ctr(totals.clicks, totals.impressions),
                cpl=compute_cpl(totals.spend, totals.leads),
                revenue=revenue,
                profit=compute_profit(revenue, totals.spend),
                roi=compute_roi(revenue, totals.spend),
            )
        )

    # Undated rows (only possible with an unbounded range) sort last.
    rows.sort(key=lambda row: row.date or date.min, reverse=True)
    return rows
