"""Filter set applied to every idea statistics query."""

from dataclasses import dataclass, replace
from datetime import datetime

from models.schemas import Interval


@dataclass(frozen=True)
class IdeaFilterSpec:
    """
    Validated, normalized filters for one statistics request.

    Bounds are timezone-aware UTC datetimes and inclusive. Every unset field
    means "no filter" on that criterion.
    """

    start_at: datetime | None = None
    end_at: datetime | None = None
    project_id: int | None = None
    group_id: int | None = None
    topic_id: int | None = None
    feedback_needed: bool = False
    interval: Interval | None = None

    def with_bounds(
        self, start_at: datetime | None, end_at: datetime | None
    ) -> "IdeaFilterSpec":
        """Copy of this spec with different time bounds."""
        return replace(self, start_at=start_at, end_at=end_at)

    def without_bounds(self) -> "IdeaFilterSpec":
        """Copy of this spec keeping only the non-time filters."""
        return self.with_bounds(None, None)

    def describe(self) -> dict[str, object]:
        """Active filters as a flat dict, for logging."""
        return {
            key: value.isoformat() if isinstance(value, datetime) else value
            for key, value in (
                ("start_at", self.start_at),
                ("end_at", self.end_at),
                ("project_id", self.project_id),
                ("group_id", self.group_id),
                ("topic_id", self.topic_id),
                ("feedback_needed", self.feedback_needed or None),
                ("interval", self.interval.value if self.interval else None),
            )
            if value is not None
        }
