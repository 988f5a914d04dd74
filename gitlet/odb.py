"""Object database: one sharded directory of immutable objects, keyed by hash, with prefix lookup."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List

from .constants import MIN_PREFIX_LEN, SHA1_HEX_LEN
from .errors import AmbiguousCommitError, ObjectNotFoundError
from .util import sha1_hash, write_bytes_atomic

logger = logging.getLogger(__name__)

_HEX = "0123456789abcdef"


def _is_full_sha(sha: str) -> bool:
    return len(sha) == SHA1_HEX_LEN and all(c in _HEX for c in sha)


class ObjectDB:
    """Loose object storage under <objects_dir>/<aa>/<bb...>. Objects are never rewritten."""

    def __init__(self, objects_dir: Path) -> None:
        self.objects_dir = Path(objects_dir)

    def _object_path(self, sha: str) -> Path:
        """Path to object file. sha must be full 40-char hex."""
        if not _is_full_sha(sha):
            raise ValueError(f"invalid full sha: {sha}")
        return self.objects_dir / sha[:2] / sha[2:]

    def exists(self, sha: str) -> bool:
        """Return True if object exists. Anything that is not a full lowercase sha does not."""
        if not _is_full_sha(sha):
            return False
        return self._object_path(sha).is_file()

    def put(self, data: bytes) -> str:
        """Store data under its own SHA-1; return the hash. Storing identical bytes twice is a no-op."""
        return self.write(sha1_hash(data), data)

    def write(self, sha: str, data: bytes) -> str:
        """Store data under sha unless an object with that key is already present."""
        path = self._object_path(sha)
        if path.exists():
            logger.debug("object %s already in %s, skipped", sha[:8], self.objects_dir.name)
            return sha
        write_bytes_atomic(path, data)
        logger.debug("stored object %s in %s (%d bytes)", sha[:8], self.objects_dir.name, len(data))
        return sha

    def get(self, sha: str) -> bytes:
        """Load object bytes by full hash. Raises ObjectNotFoundError."""
        if not self.exists(sha):
            raise ObjectNotFoundError(f"object {sha} not found")
        return self._object_path(sha).read_bytes()

    def iter_ids(self) -> Iterator[str]:
        """Yield every stored hash, sorted."""
        if not self.objects_dir.is_dir():
            return
        for shard in sorted(self.objects_dir.iterdir()):
            if not shard.is_dir() or len(shard.name) != 2:
                continue
            for f in sorted(shard.iterdir()):
                sha = shard.name + f.name
                if f.is_file() and _is_full_sha(sha):
                    yield sha

    def __len__(self) -> int:
        return sum(1 for _ in self.iter_ids())

    def prefix_lookup(self, prefix: str) -> List[str]:
        """Return list of full 40-char hashes that start with prefix. Prefix min 4 chars."""
        if len(prefix) < MIN_PREFIX_LEN:
            return []
        prefix = prefix.lower()
        if not all(c in _HEX for c in prefix):
            return []
        if len(prefix) == SHA1_HEX_LEN:
            return [prefix] if self.exists(prefix) else []
        pre_dir = self.objects_dir / prefix[:2]
        if not pre_dir.is_dir():
            return []
        suffix = prefix[2:]
        matches = []
        for f in pre_dir.iterdir():
            full_sha = prefix[:2] + f.name
            if f.is_file() and f.name.startswith(suffix) and _is_full_sha(full_sha):
                matches.append(full_sha)
        return sorted(matches)

    def resolve_prefix(self, prefix: str) -> str:
        """Resolve prefix to full hash. Raises ObjectNotFoundError or AmbiguousCommitError."""
        matches = self.prefix_lookup(prefix)
        if not matches:
            raise ObjectNotFoundError(f"object {prefix} not found")
        if len(matches) > 1:
            raise AmbiguousCommitError(f"prefix '{prefix}' is ambiguous: {matches}")
        return matches[0]
