"""
Repository pattern implementation for data access layer.
"""

from .base import BaseRepository
from .idea_stats_repository import IdeaRecord, IdeaStatsRepository
from .idea_status_repository import IdeaStatusRepository
from .project_repository import ProjectRepository
from .topic_repository import TopicRepository

__all__ = [
    "BaseRepository",
    "IdeaRecord",
    "IdeaStatsRepository",
    "IdeaStatusRepository",
    "ProjectRepository",
    "TopicRepository",
]
