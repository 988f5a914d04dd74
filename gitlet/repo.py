"""Repository: ties paths, object store, index, branch table and working area together."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from .constants import DEFAULT_BRANCH, GITLET_DIR
from .errors import FileMissingError, NotARepositoryError, RepositoryExistsError, UntrackedFileError
from .index import StagingArea, load_index, save_index
from .objects import Blob, Commit
from .objectstore import ObjectStore
from .refs import BranchTable, load_branch_table, save_branch_table
from .util import list_working_files, normalize_path, read_bytes, remove_file_and_empty_parents, write_bytes_atomic

logger = logging.getLogger(__name__)


@dataclass
class RepoState:
    """Mutable repository state for one operation: the index and the branch table."""

    staging: StagingArea
    branches: BranchTable


class Repository:
    """Gitlet repository: .gitlet dir, object store, index, branches and the working area."""

    def __init__(self, path: str | Path = ".") -> None:
        self.path = Path(path).resolve()
        self.gitlet_dir = self.path / GITLET_DIR
        self.store = ObjectStore(self.gitlet_dir)

    def require_repo(self) -> None:
        """Raise NotARepositoryError if not a gitlet repo."""
        if not self.gitlet_dir.is_dir():
            raise NotARepositoryError()

    def safe_path(self, path: str) -> Path:
        """Resolve path relative to repo root; reject escaping."""
        try:
            return normalize_path(self.path, path)
        except ValueError as e:
            raise FileMissingError(str(e)) from e

    def rel_path(self, path: str) -> str:
        """Repo-relative POSIX form of path, as used in trackers and the index."""
        return self.safe_path(path).relative_to(self.path).as_posix()

    def init(self) -> str:
        """Create a new repository with the root commit on master. Return the root commit hash."""
        if self.gitlet_dir.exists():
            raise RepositoryExistsError()
        self.gitlet_dir.mkdir(parents=True)
        self.store.create()
        root_hash = self.store.store_commit(Commit.initial())
        save_index(self.gitlet_dir, StagingArea())
        save_branch_table(
            self.gitlet_dir, BranchTable(branches={DEFAULT_BRANCH: root_hash}, current=DEFAULT_BRANCH)
        )
        from . import config
        cfg = config.read_config(self)
        if not cfg.has_section("core"):
            cfg.add_section("core")
            cfg.set("core", "repositoryformatversion", "0")
            config.write_config(self, cfg)
        logger.debug("initialized repository in %s (root %s)", self.gitlet_dir, root_hash[:7])
        return root_hash

    # -- state --

    def load_state(self) -> RepoState:
        """Load index and branch table from disk."""
        self.require_repo()
        return RepoState(staging=load_index(self.gitlet_dir), branches=load_branch_table(self.gitlet_dir))

    def save_state(self, state: RepoState) -> None:
        """Write the index, then the branch table."""
        save_index(self.gitlet_dir, state.staging)
        save_branch_table(self.gitlet_dir, state.branches)

    def head_commit(self, state: RepoState) -> Commit:
        return self.store.load_referenced_commit(state.branches.head())

    def head_tracker(self, state: RepoState) -> Dict[str, str]:
        return self.head_commit(state).tracker

    # -- working area --

    def working_file(self, rel: str) -> Path:
        return self.path / rel

    def working_blob_hash(self, rel: str) -> Optional[str]:
        """Blob hash of the working copy of rel, or None if it is not a file."""
        full = self.working_file(rel)
        if not full.is_file():
            return None
        return Blob(read_bytes(full)).hash_id()

    def working_hashes(self) -> Dict[str, str]:
        """path -> blob hash for every file in the working area."""
        return {rel: Blob(read_bytes(self.path / rel)).hash_id() for rel in list_working_files(self.path)}

    def write_tracked_file(self, rel: str, blob_hash: str) -> None:
        """Overwrite the working copy of rel with the stored blob."""
        write_bytes_atomic(self.working_file(rel), self.store.read_tracked_blob(blob_hash))

    def check_untracked(
        self,
        head_tracker: Mapping[str, str],
        target_tracker: Mapping[str, str],
        staging: Optional[StagingArea] = None,
    ) -> None:
        """Raise UntrackedFileError if an untracked working file would be overwritten.

        A file is untracked when the head does not track it (and, with staging,
        it is not staged for addition; only reset passes staging). It is in the
        way when target_tracker tracks the same path with different content.
        """
        for rel in list_working_files(self.path):
            if rel in head_tracker:
                continue
            if staging is not None and rel in staging.additions:
                continue
            target = target_tracker.get(rel)
            if target is not None and target != self.working_blob_hash(rel):
                logger.debug("untracked file in the way: %s", rel)
                raise UntrackedFileError()

    def checkout_tracker(
        self,
        old_tracker: Mapping[str, str],
        new_tracker: Mapping[str, str],
        prune_untracked: bool = False,
    ) -> None:
        """Make the working area match new_tracker.

        Files tracked by old_tracker but not by new_tracker are deleted; every
        file in new_tracker is (re)written. With prune_untracked, every other
        working file is deleted as well, so the working area holds exactly
        new_tracker.
        """
        doomed = set(old_tracker)
        if prune_untracked:
            doomed.update(list_working_files(self.path))
        for rel in sorted(doomed):
            if rel not in new_tracker:
                remove_file_and_empty_parents(self.path, rel)
        for rel, blob_hash in sorted(new_tracker.items()):
            self.write_tracked_file(rel, blob_hash)
        logger.debug("working area now matches %d tracked files", len(new_tracker))
