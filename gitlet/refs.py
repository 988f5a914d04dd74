"""Branch table: branch name -> commit hash, plus the current branch name (HEAD)."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from .constants import BRANCHES_FILENAME, DEFAULT_BRANCH, HEAD_FILE, SHA1_HEX_LEN
from .errors import (
    BranchExistsError,
    CorruptRepositoryError,
    CurrentBranchError,
    NoSuchBranchError,
)
from .util import canonical_json, read_text_safe, write_bytes_atomic, write_text_atomic

logger = logging.getLogger(__name__)


def _is_hex_sha(s: str) -> bool:
    return len(s) == SHA1_HEX_LEN and all(c in "0123456789abcdef" for c in s)


@dataclass
class BranchTable:
    """Branch pointers and the current branch. Exactly one branch is current."""

    branches: Dict[str, str] = field(default_factory=dict)
    current: str = DEFAULT_BRANCH

    def head(self) -> str:
        """Commit hash of the current branch."""
        try:
            return self.branches[self.current]
        except KeyError:
            raise CorruptRepositoryError(f"current branch '{self.current}' has no commit") from None

    def resolve(self, name: str) -> str:
        """Commit hash of branch name. Raises NoSuchBranchError."""
        try:
            return self.branches[name]
        except KeyError:
            raise NoSuchBranchError() from None

    def exists(self, name: str) -> bool:
        return name in self.branches

    def create(self, name: str, commit_hash: str) -> None:
        if name in self.branches:
            raise BranchExistsError()
        self.branches[name] = commit_hash

    def delete(self, name: str) -> None:
        if name not in self.branches:
            raise NoSuchBranchError()
        if name == self.current:
            raise CurrentBranchError("Cannot remove the current branch.")
        del self.branches[name]

    def move(self, name: str, commit_hash: str) -> None:
        """Point an existing branch at commit_hash."""
        if name not in self.branches:
            raise NoSuchBranchError()
        self.branches[name] = commit_hash

    def move_current(self, commit_hash: str) -> None:
        self.move(self.current, commit_hash)

    def switch(self, name: str) -> None:
        if name not in self.branches:
            raise NoSuchBranchError("No such branch exists.")
        self.current = name

    def names(self) -> List[str]:
        return sorted(self.branches)


def _branches_path(gitlet_dir: Path) -> Path:
    return gitlet_dir / BRANCHES_FILENAME


def _head_path(gitlet_dir: Path) -> Path:
    return gitlet_dir / HEAD_FILE


def load_branch_table(gitlet_dir: Path) -> BranchTable:
    """Read branches JSON and HEAD. Missing or malformed files mean a corrupt repository."""
    raw = read_text_safe(_branches_path(gitlet_dir))
    if raw is None:
        raise CorruptRepositoryError("branch table is missing")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise CorruptRepositoryError(f"branch table is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise CorruptRepositoryError("branch table is not a JSON object")
    branches: Dict[str, str] = {}
    for name, sha in data.items():
        if not isinstance(sha, str) or not _is_hex_sha(sha):
            raise CorruptRepositoryError(f"branch '{name}' points at invalid hash {sha!r}")
        branches[str(name)] = sha
    head = read_text_safe(_head_path(gitlet_dir))
    if head is None or not head.strip():
        raise CorruptRepositoryError("HEAD is missing")
    current = head.strip()
    if current not in branches:
        raise CorruptRepositoryError(f"HEAD names unknown branch '{current}'")
    return BranchTable(branches=branches, current=current)


def save_branch_table(gitlet_dir: Path, table: BranchTable) -> None:
    """Write HEAD, then the branch pointers (atomic each)."""
    write_text_atomic(_head_path(gitlet_dir), table.current + "\n")
    write_bytes_atomic(_branches_path(gitlet_dir), canonical_json(table.branches))
    logger.debug("saved branch table: current=%s, %d branches", table.current, len(table.branches))
