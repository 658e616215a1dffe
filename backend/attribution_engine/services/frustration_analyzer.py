"""Lost-sale ("frustrated") analysis.

Groups Lost sales by loss reason over the expected (scheduled) date, which
is a different field from the delivery date: a lost sale was never
delivered. Sales with no reason, or a reason id missing from the catalogue,
fall into one "unspecified" bucket.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from attribution_engine.dsl.date_range import DateRange, in_range
from attribution_engine.models import FrustrationReason, SaleEvent, SaleStatus

logger = logging.getLogger(__name__)

UNSPECIFIED_REASON_ID = "unspecified"
DEFAULT_UNSPECIFIED_LABEL = "Unspecified"


@dataclass(frozen=True)
class ReasonStat:
    reason_id: str
    name: str
    count: int
    percentage: float


@dataclass(frozen=True)
class FrustrationReport:
    total_count: int = 0
    total_value: float = 0.0
    reason_stats: List[ReasonStat] = field(default_factory=list)


def lost_sales(sales: Iterable[SaleEvent], date_range: DateRange) -> List[SaleEvent]:
    """Lost sales whose scheduled date is in range (any date passes for all-time)."""
    return [
        sale
        for sale in sales
        if sale.status == SaleStatus.lost and in_range(sale.scheduled_date, date_range)
    ]


def analyze(
    sales: Iterable[SaleEvent],
    reasons: Iterable[FrustrationReason],
    date_range: DateRange,
    unspecified_label: str = DEFAULT_UNSPECIFIED_LABEL,
) -> FrustrationReport:
    """Count and value of lost sales, broken down by reason (count descending)."""
    names: Dict[str, str] = {reason.id: reason.name for reason in reasons}
    matching = lost_sales(sales, date_range)

    total_count = len(matching)
    total_value = float(sum(sale.value for sale in matching))

    counts: Dict[str, int] = {}
    for sale in matching:
        reason_id: Optional[str] = sale.loss_reason_id
        if not reason_id or reason_id not in names:
            reason_id = UNSPECIFIED_REASON_ID
        counts[reason_id] = counts.get(reason_id, 0) + 1

    stats = [
        ReasonStat(
            reason_id=reason_id,
            name=unspecified_label if reason_id == UNSPECIFIED_REASON_ID else names[reason_id],
            count=count,
            percentage=(count / total_count * 100) if total_count > 0 else 0.0,
        )
        for reason_id, count in counts.items()
    ]
    # Stable: equal counts keep first-seen order.
    stats.sort(key=lambda stat: stat.count, reverse=True)

    logger.debug(f"[FRUSTRATION] {total_count} lost sales across {len(stats)} reasons in {date_range}")
    return FrustrationReport(total_count=total_count, total_value=total_value, reason_stats=stats)
