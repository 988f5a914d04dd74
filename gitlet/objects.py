"""Gitlet objects: Blob and Commit with canonical serialization and identity hashing."""

from __future__ import annotations

import json
from typing import Dict, List, Mapping, Optional

from .constants import INITIAL_COMMIT_MESSAGE, INITIAL_COMMIT_TIMESTAMP
from .util import canonical_json, current_timestamp, sha1_hash


class Blob:
    """Blob object: raw file content, identified by the hash of the bytes themselves."""

    def __init__(self, content: bytes) -> None:
        self.content = content

    def hash_id(self) -> str:
        return sha1_hash(self.content)


class Commit:
    """Commit object: message, timestamp, up to two parents and a path -> blob tracker.

    Commits are immutable once built. The identity hash covers message,
    timestamp, primary parent and tracker only; the merge parent is stored but
    is not part of the identity, so repositories written by earlier versions
    keep their commit ids.
    """

    def __init__(
        self,
        message: str,
        parent_hash: Optional[str],
        tracker: Optional[Mapping[str, str]] = None,
        timestamp: Optional[int] = None,
        merge_parent_hash: Optional[str] = None,
    ) -> None:
        self.message = message
        self.parent_hash = parent_hash or None
        self.merge_parent_hash = merge_parent_hash or None
        self.timestamp = current_timestamp() if timestamp is None else int(timestamp)
        self.tracker: Dict[str, str] = {p: tracker[p] for p in sorted(tracker or {})}

    @classmethod
    def initial(cls) -> "Commit":
        """The root commit shared by every repository."""
        return cls(INITIAL_COMMIT_MESSAGE, None, {}, timestamp=INITIAL_COMMIT_TIMESTAMP)

    @property
    def parent_hashes(self) -> List[str]:
        """Parent edges, primary first: [] for the root, [p] or [p, merge_parent]."""
        parents: List[str] = []
        if self.parent_hash:
            parents.append(self.parent_hash)
            if self.merge_parent_hash:
                parents.append(self.merge_parent_hash)
        return parents

    def has_parent(self) -> bool:
        return self.parent_hash is not None

    def is_merge(self) -> bool:
        return self.merge_parent_hash is not None

    def hash_id(self) -> str:
        """SHA-1 of (message, timestamp, parent, tracker). Merge parent deliberately excluded."""
        identity = [
            self.message,
            self.timestamp,
            self.parent_hash or "",
            [[path, blob] for path, blob in self.tracker.items()],
        ]
        return sha1_hash(canonical_json(identity))

    def serialize(self) -> bytes:
        """Canonical JSON of all fields (storage form)."""
        return canonical_json(
            {
                "message": self.message,
                "timestamp": self.timestamp,
                "parent": self.parent_hash,
                "merge_parent": self.merge_parent_hash,
                "tracker": self.tracker,
            }
        )

    @classmethod
    def from_content(cls, content: bytes) -> "Commit":
        """Parse stored commit bytes. Raises ValueError on malformed content."""
        try:
            data = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ValueError(f"invalid commit record: {e}") from e
        if not isinstance(data, dict) or "message" not in data or "timestamp" not in data:
            raise ValueError("invalid commit record: missing fields")
        tracker = data.get("tracker") or {}
        if not isinstance(tracker, dict):
            raise ValueError("invalid commit record: tracker is not a mapping")
        return cls(
            message=data["message"],
            parent_hash=data.get("parent"),
            tracker=tracker,
            timestamp=data["timestamp"],
            merge_parent_hash=data.get("merge_parent"),
        )

    def __repr__(self) -> str:
        return f"Commit({self.hash_id()[:7]} {self.message!r})"
