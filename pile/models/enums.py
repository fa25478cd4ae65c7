"""Shared enumerations."""

from __future__ import annotations

from enum import StrEnum


class MatchMode(StrEnum):
    """How multiple search terms combine."""

    ANY = "any"
    """Union: a project matches if it carries at least one term."""

    ALL = "all"
    """Intersection: a project matches only if it carries every term."""
