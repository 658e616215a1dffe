"""Pydantic schemas for request/response payloads."""

from __future__ import annotations

import datetime as dt
import math
from typing import Annotated, List, Optional

from pydantic import BaseModel, BeforeValidator, Field

from .dsl.date_range import DateRange, to_calendar_date
from .dsl.periods import PeriodSelection
from .models import (
    AdSet,
    AdSetStatus,
    Campaign,
    CampaignStatus,
    Creative,
    CreativeFormat,
    DailyMetricRecord,
    FrustrationReason,
    MarketingSnapshot,
    SaleEvent,
    SaleStatus,
)
from .services.frustration_analyzer import ReasonStat
from .services.marketing_report import RankingMode
from .services.metrics_aggregator import DailyRow
from .services.performance_ranker import RankingRow, SummaryTotals


# Accepts date, datetime or ISO string (with or without time) and keeps the day.
CalendarDate = Annotated[Optional[dt.date], BeforeValidator(to_calendar_date)]


# ============================================================================
# SNAPSHOT INPUT SCHEMAS
# ============================================================================


class CampaignIn(BaseModel):
    id: str
    name: str
    status: Optional[CampaignStatus] = CampaignStatus.active
    product_id: Optional[str] = None
    objective: Optional[str] = None

    def to_domain(self) -> Campaign:
        return Campaign(**self.model_dump())


class AdSetIn(BaseModel):
    id: str
    campaign_id: str
    name: str
    status: AdSetStatus = AdSetStatus.active
    segmentation: Optional[str] = None

    def to_domain(self) -> AdSet:
        return AdSet(**self.model_dump())


class CreativeIn(BaseModel):
    id: str
    ad_set_id: str
    name: str
    format: Optional[CreativeFormat] = None
    observations: Optional[str] = None

    def to_domain(self) -> Creative:
        return Creative(**self.model_dump())


class DailyMetricIn(BaseModel):
    """Per-day, per-creative performance figures as typed in the metrics form."""

    id: Optional[str] = None
    date: CalendarDate = Field(default=None, description="ISO date (YYYY-MM-DD); a time suffix is ignored")
    campaign_id: Optional[str] = None
    ad_set_id: Optional[str] = None
    creative_id: str
    spend: float = Field(default=0.0, ge=0)
    impressions: int = Field(default=0, ge=0)
    clicks: int = Field(default=0, ge=0)
    leads: int = Field(default=0, ge=0)
    qualified_leads: int = Field(default=0, ge=0)

    def to_domain(self) -> DailyMetricRecord:
        return DailyMetricRecord(**self.model_dump())


class SaleIn(BaseModel):
    id: str
    status: SaleStatus
    value: float
    creative_id: Optional[str] = None
    delivery_date: CalendarDate = None
    scheduled_date: CalendarDate = None
    scheduling_date: CalendarDate = None
    loss_reason_id: Optional[str] = None
    created_at: CalendarDate = None
    campaign_id: Optional[str] = None
    ad_set_id: Optional[str] = None

    def to_domain(self) -> SaleEvent:
        return SaleEvent(**self.model_dump())


class FrustrationReasonIn(BaseModel):
    id: str
    name: str
    category: Optional[str] = None

    def to_domain(self) -> FrustrationReason:
        return FrustrationReason(**self.model_dump())


class SnapshotIn(BaseModel):
    """In-memory collections handed over by the persistence layer."""

    campaigns: List[CampaignIn] = Field(default_factory=list)
    ad_sets: List[AdSetIn] = Field(default_factory=list)
    creatives: List[CreativeIn] = Field(default_factory=list)
    daily_metrics: List[DailyMetricIn] = Field(default_factory=list)
    sales: List[SaleIn] = Field(default_factory=list)
    frustration_reasons: List[FrustrationReasonIn] = Field(default_factory=list)

    def to_domain(self) -> MarketingSnapshot:
        return MarketingSnapshot(
            campaigns=tuple(c.to_domain() for c in self.campaigns),
            ad_sets=tuple(a.to_domain() for a in self.ad_sets),
            creatives=tuple(c.to_domain() for c in self.creatives),
            daily_metrics=tuple(m.to_domain() for m in self.daily_metrics),
            sales=tuple(s.to_domain() for s in self.sales),
            frustration_reasons=tuple(r.to_domain() for r in self.frustration_reasons),
        )


class PeriodIn(BaseModel):
    """Period filter as selected in the UI."""

    tag: Optional[str] = Field(default=None, description="today, last_7_days, this_month, all_time, custom, ...")
    date_from: CalendarDate = Field(default=None, description="Lower bound for custom ranges")
    date_to: CalendarDate = Field(default=None, description="Upper bound for custom ranges")
    reference_date: CalendarDate = Field(default=None, description="Caller's local today")

    def to_selection(self, default_tag: str) -> PeriodSelection:
        return PeriodSelection(tag=self.tag or default_tag, date_from=self.date_from, date_to=self.date_to)


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================


class RankingRequest(BaseModel):
    snapshot: SnapshotIn
    period: PeriodIn = Field(default_factory=PeriodIn)
    mode: RankingMode = RankingMode.creative
    top_k: Optional[int] = Field(default=None, ge=0)


class SelectionRequest(BaseModel):
    snapshot: SnapshotIn
    period: PeriodIn = Field(default_factory=PeriodIn)
    campaign_id: Optional[str] = None
    creative_ids: List[str] = Field(default_factory=list)


class FrustrationRequest(BaseModel):
    snapshot: SnapshotIn
    period: PeriodIn = Field(default_factory=PeriodIn)


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================


def _finite_or_none(value: float) -> Optional[float]:
    # JSON has no infinity literal
    return None if math.isinf(value) else value


class DateRangeOut(BaseModel):
    """
    WHAT: Resolved inclusive range; null bounds are open.
    WHY: Lets the UI show the concrete dates behind a preset.
    """

    date_from: Optional[dt.date] = None
    date_to: Optional[dt.date] = None

    @classmethod
    def from_range(cls, date_range: DateRange) -> "DateRangeOut":
        return cls(date_from=date_range.date_from, date_to=date_range.date_to)


class ResolvedPeriodResponse(DateRangeOut):
    tag: str


class RankingRowOut(BaseModel):
    """
    WHAT: One leaderboard row.
    WHY: roi is null with roi_unbounded=true for zero-spend entities that
         produced revenue, since JSON cannot carry infinity.
    """

    id: str
    name: str
    spend: float
    revenue: float
    profit: float
    roi: Optional[float]
    roi_unbounded: bool = False
    cpl: float
    ctr: float
    leads: int
    qualified_leads: int
    impressions: int
    clicks: int

    @classmethod
    def from_row(cls, row: RankingRow) -> "RankingRowOut":
        return cls(
            id=row.id,
            name=row.name,
            spend=row.spend,
            revenue=row.revenue,
            profit=row.profit,
            roi=_finite_or_none(row.roi),
            roi_unbounded=math.isinf(row.roi),
            cpl=row.cpl,
            ctr=row.ctr,
            leads=row.leads,
            qualified_leads=row.qualified_leads,
            impressions=row.impressions,
            clicks=row.clicks,
        )


class SummaryTotalsOut(BaseModel):
    """Summary card figures across every row of the filtered set."""

    spend: float
    revenue: float
    profit: float
    roi: Optional[float]
    roi_unbounded: bool = False
    cpl: float
    ctr: float
    leads: int
    qualified_leads: int
    impressions: int
    clicks: int
    count: int

    @classmethod
    def from_summary(cls, summary: SummaryTotals) -> "SummaryTotalsOut":
        return cls(
            spend=summary.spend,
            revenue=summary.revenue,
            profit=summary.profit,
            roi=_finite_or_none(summary.roi),
            roi_unbounded=math.isinf(summary.roi),
            cpl=summary.cpl,
            ctr=summary.ctr,
            leads=summary.leads,
            qualified_leads=summary.qualified_leads,
            impressions=summary.impressions,
            clicks=summary.clicks,
            count=summary.count,
        )


class RankingResponse(BaseModel):
    range: DateRangeOut
    mode: RankingMode
    rows: List[RankingRowOut]
    top: List[RankingRowOut]
    summary: SummaryTotalsOut


class SelectionSummaryResponse(BaseModel):
    range: DateRangeOut
    summary: SummaryTotalsOut


class DailyRowOut(BaseModel):
    id: Optional[str] = None
    date: Optional[dt.date] = None
    campaign_id: Optional[str] = None
    campaign_name: str
    ad_set_id: Optional[str] = None
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
    roi: Optional[float]
    roi_unbounded: bool = False

    @classmethod
    def from_row(cls, row: DailyRow) -> "DailyRowOut":
        fields = dict(row.__dict__)
        fields["roi"] = _finite_or_none(row.roi)
        fields["roi_unbounded"] = math.isinf(row.roi)
        return cls(**fields)


class DailyResponse(BaseModel):
    range: DateRangeOut
    rows: List[DailyRowOut]


class ReasonStatOut(BaseModel):
    reason_id: str
    name: str
    count: int
    percentage: float

    @classmethod
    def from_stat(cls, stat: ReasonStat) -> "ReasonStatOut":
        return cls(reason_id=stat.reason_id, name=stat.name, count=stat.count, percentage=stat.percentage)


class FrustrationResponse(BaseModel):
    range: DateRangeOut
    total_count: int
    total_value: float
    reason_stats: List[ReasonStatOut]
