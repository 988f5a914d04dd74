"""Staging area: pending additions and removals (path -> blob hash), persisted as JSON."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from .constants import INDEX_FILENAME
from .errors import CorruptRepositoryError
from .util import canonical_json, write_bytes_atomic

logger = logging.getLogger(__name__)


@dataclass
class StagingArea:
    """Delta to apply on the next commit. A path is never in both mappings."""

    additions: Dict[str, str] = field(default_factory=dict)
    removals: Dict[str, str] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.additions and not self.removals

    def clear(self) -> None:
        self.additions.clear()
        self.removals.clear()

    def stage_addition(self, path: str, blob_hash: str) -> None:
        self.removals.pop(path, None)
        self.additions[path] = blob_hash

    def stage_removal(self, path: str, blob_hash: str) -> None:
        self.additions.pop(path, None)
        self.removals[path] = blob_hash

    def unstage(self, path: str) -> None:
        """Drop any pending addition or removal for path."""
        self.additions.pop(path, None)
        self.removals.pop(path, None)

    def apply_to(self, tracker: Dict[str, str]) -> Dict[str, str]:
        """Return a copy of tracker with additions applied, then removals of the recorded blobs."""
        result = dict(tracker)
        result.update(self.additions)
        for path, blob_hash in self.removals.items():
            if result.get(path) == blob_hash:
                del result[path]
        return result

    def to_json(self) -> Dict[str, Any]:
        return {"additions": dict(self.additions), "removals": dict(self.removals)}


def _index_path(gitlet_dir: Path) -> Path:
    return gitlet_dir / INDEX_FILENAME


def _parse_mapping(data: Any, key: str) -> Dict[str, str]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise CorruptRepositoryError(f"index: '{key}' is not a mapping")
    return {str(p): str(h) for p, h in value.items()}


def load_index(gitlet_dir: Path) -> StagingArea:
    """Load index; a missing file is an empty staging area. Unparseable content is corruption."""
    path = _index_path(gitlet_dir)
    if not path.exists():
        return StagingArea()
    raw = path.read_text(encoding="utf-8")
    if not raw.strip():
        return StagingArea()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise CorruptRepositoryError(f"index is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise CorruptRepositoryError("index is not a JSON object")
    return StagingArea(
        additions=_parse_mapping(data, "additions"),
        removals=_parse_mapping(data, "removals"),
    )


def save_index(gitlet_dir: Path, staging: StagingArea) -> None:
    """Save index as JSON (atomic)."""
    write_bytes_atomic(_index_path(gitlet_dir), canonical_json(staging.to_json()))
    logger.debug(
        "saved index (%d additions, %d removals)", len(staging.additions), len(staging.removals)
    )
