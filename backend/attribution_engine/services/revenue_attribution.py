"""
Revenue Attribution
===================

WHAT:
    Credits delivered sales to the creative recorded on the sale, and rolls
    that revenue up to the owning campaign through the hierarchy.

WHY:
    Ad platforms report cost; the sales pipeline reports revenue. Putting
    both into the same per-entity buckets is what makes ROI computable.

RULES:
    A sale counts only if all of these hold:
      - status is Delivered
      - delivery date is present and inside the range
      - creative id is present
    At campaign level the creative must also resolve to a campaign; sales
    that do not resolve are left out of that view without error.

REFERENCES:
    - attribution_engine/dsl/hierarchy.py: creative → campaign lookup
    - attribution_engine/services/performance_ranker.py: merges with Totals
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, Optional, Set

from attribution_engine.dsl.date_range import DateRange, in_range, to_calendar_date
from attribution_engine.dsl.hierarchy import HierarchyIndex
from attribution_engine.models import SaleEvent, SaleStatus

logger = logging.getLogger(__name__)


def attributable_sales(sales: Iterable[SaleEvent], date_range: DateRange) -> Iterator[SaleEvent]:
    """Delivered sales with a creative and an in-range delivery date."""
    for sale in sales:
        if sale.status != SaleStatus.delivered:
            continue
        if not sale.creative_id:
            continue
        # A delivered sale with no delivery date never matches, even for all-time.
        if to_calendar_date(sale.delivery_date) is None:
            continue
        if not in_range(sale.delivery_date, date_range):
            continue
        yield sale


def attribute_by_creative(sales: Iterable[SaleEvent], date_range: DateRange) -> Dict[str, float]:
    """Revenue per creative id."""
    revenue: Dict[str, float] = {}
    for sale in attributable_sales(sales, date_range):
        revenue[sale.creative_id] = revenue.get(sale.creative_id, 0.0) + float(sale.value)
    return revenue


def attribute_by_campaign(
    sales: Iterable[SaleEvent],
    date_range: DateRange,
    hierarchy: HierarchyIndex,
) -> Dict[str, float]:
    """Revenue per campaign id, resolved creative → ad set → campaign."""
    revenue: Dict[str, float] = {}
    orphaned = 0
    for sale in attributable_sales(sales, date_range):
        campaign_id = hierarchy.campaign_of(sale.creative_id)
        if campaign_id is None:
            orphaned += 1
            continue
        revenue[campaign_id] = revenue.get(campaign_id, 0.0) + float(sale.value)

    if orphaned:
        logger.debug(f"[ATTRIBUTION] {orphaned} delivered sales did not resolve to a campaign")
    return revenue


def attribute_to_creatives(
    sales: Iterable[SaleEvent],
    date_range: DateRange,
    creative_ids: Optional[Iterable[str]],
) -> float:
    """Total revenue of attributable sales whose creative is in the given set."""
    wanted: Set[str] = set(creative_ids or ())
    return float(sum(s.value for s in attributable_sales(sales, date_range) if s.creative_id in wanted))
