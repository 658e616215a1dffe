"""
Domain Models
=============

WHAT:
    Read-only marketing entities the engine computes over: the
    campaign → ad set → creative hierarchy, daily performance records,
    sale events and the loss-reason catalogue.

WHY:
    The engine works on snapshots already materialised by the persistence
    layer. Frozen dataclasses make the "never mutate inputs" rule hold by
    construction and let the same snapshot be shared across calls.

REFERENCES:
    - attribution_engine/schemas.py: pydantic contracts that are converted into these models
    - attribution_engine/dsl/hierarchy.py: lookup tables built over Campaign/AdSet/Creative
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple, Union


# Date fields accept what the persistence layer hands us; only the date part is used.
DateLike = Union[date, datetime, str]


class CampaignStatus(str, enum.Enum):
    """Campaign lifecycle status."""

    active = "Active"
    paused = "Paused"
    disabled = "Disabled"


class AdSetStatus(str, enum.Enum):
    active = "Active"
    paused = "Paused"


class CreativeFormat(str, enum.Enum):
    video = "Video"
    image = "Image"
    carousel = "Carousel"


class SaleStatus(str, enum.Enum):
    """Sale lifecycle status.

    Delivered and Lost are terminal. Only Delivered feeds revenue
    attribution; only Lost feeds the frustration analysis.
    """

    scheduled = "Scheduled"
    rescheduled = "Rescheduled"
    delivered = "Delivered"
    lost = "Lost"


@dataclass(frozen=True)
class Campaign:
    id: str
    name: str
    # Legacy records may have no status; they are listed with the active ones.
    status: Optional[CampaignStatus] = CampaignStatus.active
    product_id: Optional[str] = None
    objective: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status is None or self.status == CampaignStatus.active


@dataclass(frozen=True)
class AdSet:
    id: str
    campaign_id: str
    name: str
    status: AdSetStatus = AdSetStatus.active
    segmentation: Optional[str] = None


@dataclass(frozen=True)
class Creative:
    id: str
    ad_set_id: str
    name: str
    format: Optional[CreativeFormat] = None
    observations: Optional[str] = None


@dataclass(frozen=True)
class DailyMetricRecord:
    """One per-day, per-creative performance snapshot.

    Several records may share the same (date, creative) pair; they are summed.
    """

    date: Optional[DateLike]
    campaign_id: Optional[str]
    ad_set_id: Optional[str]
    creative_id: str
    spend: float = 0.0
    impressions: int = 0
    clicks: int = 0
    leads: int = 0
    qualified_leads: int = 0
    id: Optional[str] = None


@dataclass(frozen=True)
class SaleEvent:
    id: str
    status: SaleStatus
    value: float
    creative_id: Optional[str] = None
    delivery_date: Optional[DateLike] = None
    scheduled_date: Optional[DateLike] = None
    scheduling_date: Optional[DateLike] = None
    loss_reason_id: Optional[str] = None
    created_at: Optional[DateLike] = None
    # Copies kept on the sale by the sales form; attribution ignores them.
    campaign_id: Optional[str] = None
    ad_set_id: Optional[str] = None


@dataclass(frozen=True)
class FrustrationReason:
    id: str
    name: str
    category: Optional[str] = None


@dataclass(frozen=True)
class MarketingSnapshot:
    """Everything one computation reads, materialised before the engine runs."""

    campaigns: Tuple[Campaign, ...] = field(default_factory=tuple)
    ad_sets: Tuple[AdSet, ...] = field(default_factory=tuple)
    creatives: Tuple[Creative, ...] = field(default_factory=tuple)
    daily_metrics: Tuple[DailyMetricRecord, ...] = field(default_factory=tuple)
    sales: Tuple[SaleEvent, ...] = field(default_factory=tuple)
    frustration_reasons: Tuple[FrustrationReason, ...] = field(default_factory=tuple)
