"""Gitlet: a minimal local version-control system (init, add, commit, branch, checkout, merge)."""

from .repo import Repository
from .errors import GitletError, NotARepositoryError

__all__ = ["Repository", "GitletError", "NotARepositoryError"]
