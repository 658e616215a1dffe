"""
Marketing Router
================

WHAT:
    FastAPI router exposing the marketing ranking, summary cards, daily
    metrics table and lost-sale breakdown.

WHY:
    The dashboard fetches its snapshot from the document store and needs one
    well-defined place to turn it into ranked, comparable numbers instead of
    re-implementing the rules in the frontend.

NOTES:
    - Stateless: every request carries its own snapshot and period.
    - ROI may be unbounded; it is sent as `roi: null, roi_unbounded: true`.

REFERENCES:
    - attribution_engine/services/marketing_report.py (pipeline)
    - attribution_engine/schemas.py (request/response contracts)
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from attribution_engine.deps import Settings, get_report_service, get_settings
from attribution_engine.dsl.periods import local_today, resolve
from attribution_engine.errors import InvalidPeriodError
from attribution_engine.schemas import (
    DailyResponse,
    DailyRowOut,
    DateRangeOut,
    FrustrationRequest,
    FrustrationResponse,
    PeriodIn,
    RankingRequest,
    RankingResponse,
    RankingRowOut,
    ReasonStatOut,
    ResolvedPeriodResponse,
    SelectionRequest,
    SelectionSummaryResponse,
    SummaryTotalsOut,
)
from attribution_engine.services.marketing_report import MarketingReportService
from attribution_engine.telemetry import capture_exception

logger = logging.getLogger(__name__)


router = APIRouter(
    prefix="/marketing",
    tags=["Marketing"],
    responses={
        400: {"description": "Invalid period selection"},
        422: {"description": "Malformed snapshot"},
    },
)


def _reference_date(period: PeriodIn, settings: Settings) -> date:
    """Caller-supplied local today, else today in the configured zone."""
    if period.reference_date is not None:
        return period.reference_date
    return local_today(settings.TIMEZONE)


def _bad_period(exc: InvalidPeriodError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def _unexpected(exc: Exception, endpoint: str) -> HTTPException:
    logger.error(f"[MARKETING] {endpoint} failed: {exc}")
    capture_exception(exc, extra={"endpoint": endpoint})
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Report computation failed")


@router.get("/periods/resolve", response_model=ResolvedPeriodResponse)
def resolve_period(
    *,
    settings: Settings = Depends(get_settings),
    tag: Optional[str] = Query(None, description="today, last_7_days, this_month, all_time, custom, ..."),
    reference_date: Optional[date] = Query(None, description="Caller's local today"),
    date_from: Optional[date] = Query(None, description="Custom lower bound"),
    date_to: Optional[date] = Query(None, description="Custom upper bound"),
):
    """Resolve a period preset into concrete dates (null = open bound)."""

    effective_tag = tag or settings.DEFAULT_PERIOD
    today = reference_date or local_today(settings.TIMEZONE)
    try:
        date_range = resolve(effective_tag, today, date_from, date_to)
    except InvalidPeriodError as exc:
        raise _bad_period(exc) from exc
    return ResolvedPeriodResponse(tag=effective_tag, date_from=date_range.date_from, date_to=date_range.date_to)


@router.post("/ranking", response_model=RankingResponse)
def ranking(
    payload: RankingRequest,
    settings: Settings = Depends(get_settings),
    service: MarketingReportService = Depends(get_report_service),
):
    """
    WHAT: Creative or campaign leaderboard for the period.

    WHY: Ranking page shows the top-K rows and summary cards over all rows.
    """

    try:
        report = service.get_ranking(
            payload.snapshot.to_domain(),
            payload.period.to_selection(settings.DEFAULT_PERIOD),
            mode=payload.mode,
            reference_date=_reference_date(payload.period, settings),
            top_k=payload.top_k,
        )
    except InvalidPeriodError as exc:
        raise _bad_period(exc) from exc
    except Exception as exc:
        raise _unexpected(exc, "ranking") from exc

    return RankingResponse(
        range=DateRangeOut.from_range(report.date_range),
        mode=report.mode,
        rows=[RankingRowOut.from_row(row) for row in report.rows],
        top=[RankingRowOut.from_row(row) for row in report.top],
        summary=SummaryTotalsOut.from_summary(report.summary),
    )


@router.post("/summary", response_model=SelectionSummaryResponse)
def selection_summary(
    payload: SelectionRequest,
    settings: Settings = Depends(get_settings),
    service: MarketingReportService = Depends(get_report_service),
):
    """Summary cards for the metrics table selection (campaign / creatives)."""

    try:
        result = service.get_selection_summary(
            payload.snapshot.to_domain(),
            payload.period.to_selection(settings.DEFAULT_PERIOD),
            campaign_id=payload.campaign_id,
            creative_ids=payload.creative_ids,
            reference_date=_reference_date(payload.period, settings),
        )
    except InvalidPeriodError as exc:
        raise _bad_period(exc) from exc
    except Exception as exc:
        raise _unexpected(exc, "summary") from exc

    return SelectionSummaryResponse(
        range=DateRangeOut.from_range(result.date_range),
        summary=SummaryTotalsOut.from_summary(result.summary),
    )


@router.post("/daily", response_model=DailyResponse)
def daily_metrics(
    payload: SelectionRequest,
    settings: Settings = Depends(get_settings),
    service: MarketingReportService = Depends(get_report_service),
):
    """Daily metrics table, newest day first."""

    try:
        result = service.get_daily(
            payload.snapshot.to_domain(),
            payload.period.to_selection(settings.DEFAULT_PERIOD),
            campaign_id=payload.campaign_id,
            creative_ids=payload.creative_ids,
            reference_date=_reference_date(payload.period, settings),
        )
    except InvalidPeriodError as exc:
        raise _bad_period(exc) from exc
    except Exception as exc:
        raise _unexpected(exc, "daily") from exc

    return DailyResponse(
        range=DateRangeOut.from_range(result.date_range),
        rows=[DailyRowOut.from_row(row) for row in result.rows],
    )


@router.post("/frustration", response_model=FrustrationResponse)
def frustration(
    payload: FrustrationRequest,
    settings: Settings = Depends(get_settings),
    service: MarketingReportService = Depends(get_report_service),
):
    """Lost sales by reason, filtered on the scheduled date."""

    try:
        result = service.get_frustration(
            payload.snapshot.to_domain(),
            payload.period.to_selection(settings.DEFAULT_PERIOD),
            reference_date=_reference_date(payload.period, settings),
        )
    except InvalidPeriodError as exc:
        raise _bad_period(exc) from exc
    except Exception as exc:
        raise _unexpected(exc, "frustration") from exc

    return FrustrationResponse(
        range=DateRangeOut.from_range(result.date_range),
        total_count=result.report.total_count,
        total_value=result.report.total_value,
        reason_stats=[ReasonStatOut.from_stat(stat) for stat in result.report.reason_stats],
    )
