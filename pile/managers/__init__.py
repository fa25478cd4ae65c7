"""Data access managers.

Managers encapsulate CRUD operations on the workspace and raise domain
exceptions from ``pile.errors``, never print or exit -- translating errors
into messages and exit codes is the CLI's responsibility.
"""

from pile.managers.projects import ProjectStore

__all__ = ["ProjectStore"]
