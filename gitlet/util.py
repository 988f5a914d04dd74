"""Helper functions: hashing, atomic file writes, dates, working-file listing."""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
import time
from pathlib import Path
from typing import Any, List, Optional

from .constants import GITLET_DIR, LOG_DATE_FORMAT


def sha1_hash(data: bytes) -> str:
    """Compute SHA-1 hex digest of data."""
    return hashlib.sha1(data).hexdigest()


def canonical_json(value: Any) -> bytes:
    """Deterministic JSON encoding: sorted keys, no whitespace, UTF-8."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def read_bytes(path: Path) -> bytes:
    """Read file as bytes. Raises FileNotFoundError if not found."""
    return path.read_bytes()


def write_bytes_atomic(path: Path, data: bytes) -> None:
    """Write bytes to file atomically (temp then replace)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=".tmp_")
    try:
        os.write(fd, data)
        os.close(fd)
        os.replace(tmp, path)
    except Exception:
        try:
            os.close(fd)
        except OSError:
            pass
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


def write_text_atomic(path: Path, text: str) -> None:
    """Write text to file atomically."""
    write_bytes_atomic(path, text.encode("utf-8"))


def read_text_safe(path: Path) -> Optional[str]:
    """Read file as text; return None if not found or error."""
    try:
        return path.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return None


def format_timestamp(timestamp: int) -> str:
    """Format a Unix timestamp in local time, e.g. 'Thu Jan 01 00:00:00 1970 +0000'."""
    return time.strftime(LOG_DATE_FORMAT, time.localtime(timestamp))


def current_timestamp() -> int:
    return int(time.time())


def list_working_files(root: Path) -> List[str]:
    """Return sorted repo-relative POSIX paths of every file under root, skipping .gitlet."""
    root = Path(root)
    files: List[str] = []
    for f in root.rglob("*"):
        if not f.is_file():
            continue
        rel = f.relative_to(root)
        if rel.parts and rel.parts[0] == GITLET_DIR:
            continue
        files.append(rel.as_posix())
    return sorted(files)


def remove_file_and_empty_parents(root: Path, rel: str) -> None:
    """Delete root/rel if present, then prune now-empty parent directories up to root."""
    full = root / rel
    full.unlink(missing_ok=True)
    parent = full.parent
    while parent != root and parent.exists() and not any(parent.iterdir()):
        parent.rmdir()
        parent = parent.parent


def normalize_path(repo_root: Path, path: str) -> Path:
    """Resolve path relative to repo root; reject paths escaping root."""
    repo_root = repo_root.resolve()
    resolved = (repo_root / path).resolve()
    try:
        resolved.relative_to(repo_root)
    except ValueError:
        raise ValueError(f"path escapes repository: {path}") from None
    return resolved
