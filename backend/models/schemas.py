from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field


# Auth Schemas
class TokenData(BaseModel):
    email: Optional[str] = None


# ============================================================================
# Idea Statistics Schemas
# ============================================================================


class Interval(str, Enum):
    """Bucket granularity for time-series queries."""

    DAY = "day"
    WEEK = "week"  # ISO week, starting on Monday
    MONTH = "month"
    YEAR = "year"


class StatsDimension(str, Enum):
    """Dimension an idea count can be grouped by."""

    TOPIC = "topic"  # fan-out: one idea counts once per topic
    STATUS = "status"
    PROJECT = "project"


class IdeasCountResponse(BaseModel):
    """Plain count of eligible ideas."""

    count: int = Field(..., ge=0)


class IdeasSeries(BaseModel):
    """
    Counts keyed by group.

    Keys are stringified ids for grouped queries and ISO dates (bucket start)
    for time series. Time series keys are in ascending order.
    """

    ideas: Dict[str, int]


class IdeasSeriesResponse(BaseModel):
    """Compact form of a grouped or time-series query."""

    series: IdeasSeries


class IdeasByProjectResponse(IdeasSeriesResponse):
    """Counts per project, plus project titles for presentation."""

    projects: Dict[str, str]
