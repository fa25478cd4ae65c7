"""Project data models.

A project is one named subdirectory of the workspace, optionally annotated
with tags.  These models are immutable snapshots of the on-disk state at the
moment they were loaded; the directory tree stays authoritative.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class Project(BaseModel):
    """A project directory and its tag set."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: Path
    tags: frozenset[str] = Field(default_factory=frozenset, description="Normalized (lowercase) tags")

    @property
    def sorted_tags(self) -> list[str]:
        return sorted(self.tags)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags


class SearchHit(BaseModel):
    """A project returned by a tag search, with the terms it matched."""

    model_config = ConfigDict(frozen=True)

    project: Project
    matched_terms: tuple[str, ...] = ()

    @property
    def matched(self) -> int:
        return len(self.matched_terms)
