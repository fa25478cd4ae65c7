"""Tag search over the project store.

Every query rebuilds the ``TagIndex`` from the store, so results always
reflect the on-disk state at query time, including changes made earlier in
the same process.

Matching is case-insensitive and exact: ``"py"`` never matches ``"python"``.
Results are ranked by the number of matched terms (descending), then by
project name (ascending).

Edge cases:

- ``ALL`` with no terms returns every project (the empty intersection).
- ``ANY`` with no terms returns nothing (the empty union).
"""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from pile.managers.projects import ProjectStore
from pile.models import MatchMode, Project, SearchHit
from pile.search.index import TagIndex
from pile.store.codec import normalize, normalize_tag


class QueryEngine:
    """Answers tag queries against a ``ProjectStore``."""

    def __init__(self, store: ProjectStore) -> None:
        self._store = store

    def build_index(self) -> TagIndex:
        return TagIndex.build(self._store.iter_projects())

    def rank(self, terms: Iterable[str], mode: MatchMode = MatchMode.ALL) -> list[SearchHit]:
        """Return matching projects with the terms each one matched."""
        wanted = sorted(normalize(terms))
        index = self.build_index()
        projects = index.projects

        if not wanted:
            if mode == MatchMode.ANY:
                return []
            return [SearchHit(project=projects[name]) for name in sorted(projects)]

        matched: dict[str, list[str]] = {}
        for term in wanted:
            for name in index.lookup(term):
                matched.setdefault(name, []).append(term)

        if mode == MatchMode.ALL:
            matched = {name: found for name, found in matched.items() if len(found) == len(wanted)}

        hits = [SearchHit(project=projects[name], matched_terms=tuple(found)) for name, found in matched.items()]
        hits.sort(key=lambda hit: (-hit.matched, hit.project.name))
        logger.debug("Search {} ({}) -> {} hit(s)", wanted, mode, len(hits))
        return hits

    def search(self, terms: Iterable[str], mode: MatchMode = MatchMode.ALL) -> list[Project]:
        """Return matching projects, best match first."""
        return [hit.project for hit in self.rank(terms, mode)]

    def filter_projects(self, *, name: str | None = None, tag: str | None = None) -> list[Project]:
        """Filter the project listing.

        ``name`` is a case-insensitive substring of the project name; ``tag``
        is an exact tag.  Both filters combine with AND.
        """
        projects = self._store.list_projects()
        if name:
            needle = name.casefold()
            projects = [p for p in projects if needle in p.name.casefold()]
        if tag is not None:
            wanted = normalize_tag(tag)
            projects = [p for p in projects if wanted in p.tags]
        return projects

    def tag_counts(self) -> dict[str, int]:
        """Every tag in the workspace with its project count."""
        return self.build_index().tags()
