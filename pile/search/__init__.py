"""Tag index and query engine."""

from pile.search.engine import QueryEngine
from pile.search.index import TagIndex

__all__ = ["QueryEngine", "TagIndex"]
