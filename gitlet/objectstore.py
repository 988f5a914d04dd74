"""Object store: blobs sub-store (raw bytes by content hash) and commits sub-store (by identity hash)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Tuple

from .constants import BLOBS_DIR, COMMITS_DIR
from .errors import CorruptRepositoryError, NoSuchCommitError, ObjectNotFoundError
from .objects import Commit
from .odb import ObjectDB

logger = logging.getLogger(__name__)


class ObjectStore:
    """Content-addressed storage for a repository: one ObjectDB for blobs, one for commits."""

    def __init__(self, gitlet_dir: Path) -> None:
        self.gitlet_dir = Path(gitlet_dir)
        self.blobs = ObjectDB(self.gitlet_dir / BLOBS_DIR)
        self.commits = ObjectDB(self.gitlet_dir / COMMITS_DIR)

    def create(self) -> None:
        """Create the sub-store directories (init)."""
        self.blobs.objects_dir.mkdir(parents=True, exist_ok=True)
        self.commits.objects_dir.mkdir(parents=True, exist_ok=True)

    # -- blobs --

    def put(self, data: bytes) -> str:
        """Store blob bytes; return content hash. Idempotent."""
        return self.blobs.put(data)

    def get(self, sha: str) -> bytes:
        """Load blob bytes. Raises ObjectNotFoundError."""
        return self.blobs.get(sha)

    def read_tracked_blob(self, sha: str) -> bytes:
        """Load a blob some tracker or index refers to. A missing one means the repository is corrupt."""
        try:
            return self.blobs.get(sha)
        except ObjectNotFoundError as e:
            raise CorruptRepositoryError(f"tracked blob {sha} is missing from the object store") from e

    # -- commits --

    def store_commit(self, commit: Commit) -> str:
        """Write commit under its identity hash; return the hash. An existing record is kept."""
        sha = commit.hash_id()
        if self.commits.exists(sha):
            existing = Commit.from_content(self.commits.get(sha))
            if existing.merge_parent_hash != commit.merge_parent_hash:
                logger.warning(
                    "commit %s already stored with merge parent %s; keeping it (merge parent is not part of the id)",
                    sha[:8],
                    existing.merge_parent_hash,
                )
        return self.commits.write(sha, commit.serialize())

    def load_commit(self, sha: str) -> Commit:
        """Load commit by full hash. Raises ObjectNotFoundError, or CorruptRepositoryError if unreadable."""
        content = self.commits.get(sha)
        try:
            return Commit.from_content(content)
        except ValueError as e:
            raise CorruptRepositoryError(f"commit {sha} is unreadable: {e}") from e

    def load_referenced_commit(self, sha: str) -> Commit:
        """Load a commit named by a parent edge or branch pointer; missing means corruption."""
        try:
            return self.load_commit(sha)
        except ObjectNotFoundError as e:
            raise CorruptRepositoryError(f"commit {sha} is missing from the object store") from e

    def resolve_commit_id(self, commit_id: str) -> str:
        """Resolve a full or abbreviated commit id. Raises NoSuchCommitError or AmbiguousCommitError."""
        try:
            return self.commits.resolve_prefix(commit_id.strip())
        except ObjectNotFoundError:
            raise NoSuchCommitError() from None

    def iter_commits(self) -> Iterator[Tuple[str, Commit]]:
        """Yield (hash, commit) for every stored commit."""
        for sha in self.commits.iter_ids():
            yield sha, self.load_commit(sha)
