"""Models package - Pydantic schemas and domain types."""

from .schemas import Interval, StatsDimension
from .stats_filters import IdeaFilterSpec

__all__ = [
    "IdeaFilterSpec",
    "Interval",
    "StatsDimension",
]
