"""
Services layer for business logic.

This package contains service modules that encapsulate business logic
separate from the API routes.
"""

from .idea_stats_service import IdeaStatsService
from .label_service import LabelService
from .stats_export_service import StatsExportService

__all__ = [
    "IdeaStatsService",
    "LabelService",
    "StatsExportService",
]
