"""Data models for pile."""

from pile.models.enums import MatchMode
from pile.models.project import Project, SearchHit

__all__ = [
    # Enums
    "MatchMode",
    # Project
    "Project",
    "SearchHit",
]
