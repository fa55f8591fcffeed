"""
Stats Export Service - tabular renderings of idea statistics.

Tables are built from the very same grouped counts as the JSON responses,
then written out as xlsx workbooks with openpyxl.
"""

import io
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from openpyxl import Workbook
from openpyxl.styles import Font
from sqlalchemy.orm import Session

from helpers.time_buckets import format_bucket
from models.exceptions import EmptyExportDomainException
from models.schemas import StatsDimension
from models.stats_filters import IdeaFilterSpec
from services.idea_stats_service import IdeaStatsService
from services.label_service import LabelService

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Sheet titles are capped at 31 characters by Excel
MAX_SHEET_TITLE = 31


@dataclass
class StatsTable:
    """Header row plus data rows, ready to be written to a spreadsheet."""

    headers: list[str]
    rows: list[list[Any]] = field(default_factory=list)


class StatsExportService:
    """Service for exporting idea statistics as spreadsheets."""

    @staticmethod
    def dimension_table(
        db: Session,
        spec: IdeaFilterSpec,
        dimension: StatsDimension,
        locale: str,
    ) -> StatsTable:
        """
        One row per group: localized title, id and idea count, in id order.

        Args:
            db: Database session
            spec: Filters
            dimension: Topic, status or project
            locale: Locale of the title column

        Returns:
            StatsTable with headers `[<dimension>, <dimension>_id, ideas]`
        """
        counts = IdeaStatsService.group_counts(db, spec, dimension)
        titles = LabelService.titles(db, dimension, counts, locale)

        table = StatsTable(headers=[dimension.value, f"{dimension.value}_id", "ideas"])
        for key in sorted(counts):
            table.rows.append([titles.get(key, ""), key, counts[key]])
        return table

    @staticmethod
    def time_table(
        db: Session,
        spec: IdeaFilterSpec,
        tz: ZoneInfo,
        *,
        cumulative: bool = False,
        now: datetime | None = None,
    ) -> StatsTable:
        """
        One row per time bucket: bucket start date and amount, ascending.

        Raises:
            EmptyExportDomainException: If the window contains no bucket.
        """
        counts = IdeaStatsService.time_counts(
            db, spec, tz, cumulative=cumulative, now=now
        )
        if not counts:
            raise EmptyExportDomainException()

        return StatsTable(
            headers=["date", "amount"],
            rows=[[format_bucket(day), amount] for day, amount in counts.items()],
        )

    @staticmethod
    def to_xlsx(table: StatsTable, sheet_title: str) -> bytes:
        """
        Write a table to an xlsx workbook.

        Args:
            table: Rows to write
            sheet_title: Title of the single worksheet

        Returns:
            Workbook file content
        """
        wb = Workbook()
        ws = wb.active
        ws.title = sheet_title[:MAX_SHEET_TITLE]

        ws.append(table.headers)
        for cell in ws[1]:
            cell.font = Font(bold=True)

        for row in table.rows:
            ws.append(row)

        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()
