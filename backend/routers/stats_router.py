"""
Stats Router - Admin-only idea statistics.

Every endpoint is a read-only GET. Grouped and time-series queries come in a
compact JSON form and an xlsx export built from the same counts.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

import authentication.auth as auth
import repositories.db_models as db_models
from helpers.rate_limiter import export_rate_key, limiter
from models.config import settings
from models.schemas import (
    IdeasByProjectResponse,
    IdeasCountResponse,
    IdeasSeriesResponse,
    StatsDimension,
)
from models.stats_filters import IdeaFilterSpec
from repositories.database import get_db
from services.config_service import get_timezone
from services.idea_stats_service import IdeaStatsService
from services.label_service import resolve_locale
from services.stats_export_service import (
    XLSX_MEDIA_TYPE,
    StatsExportService,
    StatsTable,
)
from services.stats_filter_builder import build_filter_spec

router = APIRouter(prefix="/stats", tags=["Stats"])


@dataclass
class StatsQuery:
    """Raw filter parameters, parsed leniently later on."""

    start_at: Optional[str]
    end_at: Optional[str]
    project: Optional[str]
    group: Optional[str]
    topic: Optional[str]
    feedback_needed: Optional[str]
    interval: Optional[str]

    def to_spec(
        self,
        *,
        with_topic: bool = True,
        with_project: bool = True,
        require_interval: bool = False,
    ) -> IdeaFilterSpec:
        return build_filter_spec(
            start_at=self.start_at,
            end_at=self.end_at,
            project=self.project if with_project else None,
            group=self.group,
            topic=self.topic if with_topic else None,
            feedback_needed=self.feedback_needed,
            interval=self.interval,
            require_interval=require_interval,
            tz=get_timezone(),
        )


def stats_query(
    start_at: Optional[str] = Query(
        None,
        description="Only ideas published at or after this time (ISO 8601)",
        examples=["2024-01-01T00:00:00Z"],
    ),
    end_at: Optional[str] = Query(
        None,
        description="Only ideas published at or before this time (ISO 8601)",
        examples=["2024-12-31"],
    ),
    project: Optional[str] = Query(None, description="Project ID"),
    group: Optional[str] = Query(
        None, description="User group ID; keeps ideas authored by its members"
    ),
    topic: Optional[str] = Query(None, description="Topic ID"),
    feedback_needed: Optional[str] = Query(
        None, description="Only ideas still awaiting official feedback"
    ),
    interval: Optional[str] = Query(
        None, description="Time bucket: day, week, month or year"
    ),
) -> StatsQuery:
    """Collect filter parameters; anything else in the query string is ignored."""
    return StatsQuery(
        start_at=start_at,
        end_at=end_at,
        project=project,
        group=group,
        topic=topic,
        feedback_needed=feedback_needed,
        interval=interval,
    )


def _xlsx_response(table: StatsTable, endpoint: str) -> StreamingResponse:
    content = StatsExportService.to_xlsx(table, sheet_title=endpoint)
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    filename = f"{endpoint}_{timestamp}.xlsx"
    return StreamingResponse(
        iter([content]),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get(
    "/ideas_count",
    response_model=IdeasCountResponse,
    summary="Count ideas",
)
def get_ideas_count(
    query: StatsQuery = Depends(stats_query),
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> IdeasCountResponse:
    """
    Count published ideas matching the filters.

    Domain exceptions are caught by centralized exception handlers.
    """
    return IdeaStatsService.count_ideas(db, query.to_spec())


@router.get(
    "/ideas_by_topic",
    response_model=IdeasSeriesResponse,
    summary="Count ideas per topic",
    description="An idea with several topics counts once for each of them.",
)
def get_ideas_by_topic(
    query: StatsQuery = Depends(stats_query),
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> IdeasSeriesResponse:
    return IdeaStatsService.ideas_by_topic(db, query.to_spec(with_topic=False))


@router.get("/ideas_by_topic_as_xlsx", summary="Export ideas per topic as xlsx")
@limiter.limit(settings.STATS_EXPORT_RATE_LIMIT, key_func=export_rate_key)
def export_ideas_by_topic(
    request: Request,
    query: StatsQuery = Depends(stats_query),
    accept_language: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> StreamingResponse:
    table = StatsExportService.dimension_table(
        db,
        query.to_spec(with_topic=False),
        StatsDimension.TOPIC,
        resolve_locale(accept_language),
    )
    return _xlsx_response(table, "ideas_by_topic")


@router.get(
    "/ideas_by_status",
    response_model=IdeasSeriesResponse,
    summary="Count ideas per status",
)
def get_ideas_by_status(
    query: StatsQuery = Depends(stats_query),
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> IdeasSeriesResponse:
    return IdeaStatsService.ideas_by_status(db, query.to_spec())


@router.get("/ideas_by_status_as_xlsx", summary="Export ideas per status as xlsx")
@limiter.limit(settings.STATS_EXPORT_RATE_LIMIT, key_func=export_rate_key)
def export_ideas_by_status(
    request: Request,
    query: StatsQuery = Depends(stats_query),
    accept_language: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> StreamingResponse:
    table = StatsExportService.dimension_table(
        db, query.to_spec(), StatsDimension.STATUS, resolve_locale(accept_language)
    )
    return _xlsx_response(table, "ideas_by_status")


@router.get(
    "/ideas_by_project",
    response_model=IdeasByProjectResponse,
    summary="Count ideas per project",
    description="Also returns project titles, localized via Accept-Language.",
)
def get_ideas_by_project(
    query: StatsQuery = Depends(stats_query),
    accept_language: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> IdeasByProjectResponse:
    return IdeaStatsService.ideas_by_project(
        db, query.to_spec(with_project=False), resolve_locale(accept_language)
    )


@router.get("/ideas_by_project_as_xlsx", summary="Export ideas per project as xlsx")
@limiter.limit(settings.STATS_EXPORT_RATE_LIMIT, key_func=export_rate_key)
def export_ideas_by_project(
    request: Request,
    query: StatsQuery = Depends(stats_query),
    accept_language: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> StreamingResponse:
    table = StatsExportService.dimension_table(
        db,
        query.to_spec(with_project=False),
        StatsDimension.PROJECT,
        resolve_locale(accept_language),
    )
    return _xlsx_response(table, "ideas_by_project")


@router.get(
    "/ideas_by_time",
    response_model=IdeasSeriesResponse,
    summary="Count ideas per time bucket",
    description="Dense series keyed by bucket start date. Requires `interval`.",
)
def get_ideas_by_time(
    query: StatsQuery = Depends(stats_query),
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> IdeasSeriesResponse:
    return IdeaStatsService.ideas_by_time(
        db, query.to_spec(require_interval=True), get_timezone()
    )


@router.get("/ideas_by_time_as_xlsx", summary="Export ideas per time bucket as xlsx")
@limiter.limit(settings.STATS_EXPORT_RATE_LIMIT, key_func=export_rate_key)
def export_ideas_by_time(
    request: Request,
    query: StatsQuery = Depends(stats_query),
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> StreamingResponse:
    table = StatsExportService.time_table(
        db, query.to_spec(require_interval=True), get_timezone()
    )
    return _xlsx_response(table, "ideas_by_time")


@router.get(
    "/ideas_by_time_cumulative",
    response_model=IdeasSeriesResponse,
    summary="Running total of ideas per time bucket",
    description="Each bucket reports the number of ideas published up to its end.",
)
def get_ideas_by_time_cumulative(
    query: StatsQuery = Depends(stats_query),
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> IdeasSeriesResponse:
    return IdeaStatsService.ideas_by_time(
        db, query.to_spec(require_interval=True), get_timezone(), cumulative=True
    )


@router.get(
    "/ideas_by_time_cumulative_as_xlsx",
    summary="Export the running total of ideas as xlsx",
)
@limiter.limit(settings.STATS_EXPORT_RATE_LIMIT, key_func=export_rate_key)
def export_ideas_by_time_cumulative(
    request: Request,
    query: StatsQuery = Depends(stats_query),
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> StreamingResponse:
    table = StatsExportService.time_table(
        db, query.to_spec(require_interval=True), get_timezone(), cumulative=True
    )
    return _xlsx_response(table, "ideas_by_time_cumulative")
