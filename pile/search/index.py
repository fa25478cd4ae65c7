"""In-memory tag index.

Built from already-loaded ``Project`` values; never touches the disk and is
never persisted.  Building is O(total tag count), so the query engine simply
rebuilds it for every query instead of tracking invalidation.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from pile.models import Project


class TagIndex:
    """Mapping tag -> names of the projects carrying it."""

    def __init__(self, projects: dict[str, Project], by_tag: dict[str, frozenset[str]]) -> None:
        self._projects = projects
        self._by_tag = by_tag

    @classmethod
    def build(cls, projects: Iterable[Project]) -> TagIndex:
        by_name: dict[str, Project] = {}
        by_tag: defaultdict[str, set[str]] = defaultdict(set)
        for project in projects:
            by_name[project.name] = project
            for tag in project.tags:
                by_tag[tag].add(project.name)
        return cls(by_name, {tag: frozenset(names) for tag, names in by_tag.items()})

    @property
    def projects(self) -> dict[str, Project]:
        """All indexed projects keyed by name."""
        return dict(self._projects)

    def lookup(self, tag: str) -> frozenset[str]:
        """Names of projects carrying *tag* (already normalized)."""
        return self._by_tag.get(tag, frozenset())

    def tags(self) -> dict[str, int]:
        """Every known tag with the number of projects carrying it, sorted by tag."""
        return {tag: len(self._by_tag[tag]) for tag in sorted(self._by_tag)}

    def __contains__(self, tag: object) -> bool:
        return tag in self._by_tag

    def __len__(self) -> int:
        return len(self._by_tag)
