"""Merge engine: split point selection, per-path three-way classification, conflict synthesis."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Set

from .constants import CONFLICT_END, CONFLICT_SEPARATOR, CONFLICT_START
from .errors import CorruptRepositoryError
from .graph import ancestor_distances, ancestors, get_commit_parents
from .objects import Blob
from .objectstore import ObjectStore

logger = logging.getLogger(__name__)

# Per-path outcomes
CONFLICT = "conflict"
REMOVE = "remove"
TAKE_OTHER = "take_other"
KEEP_CURRENT = "keep_current"
ADD = "add"


@dataclass
class MergeOutcome:
    """Merged tracker plus the conflicting paths and the conflict blobs still to be stored."""

    tracker: Dict[str, str]
    conflicts: List[str] = field(default_factory=list)
    new_blobs: Dict[str, bytes] = field(default_factory=dict)


def split_point(store: ObjectStore, current: str, other: str, shortest: bool = False) -> str:
    """Return the hash of the common ancestor used as merge base for current and other.

    Common ancestors that are a parent of another common ancestor are dropped;
    of the rest, the one closest to current wins. Distances come from
    ancestor_distances (first-recorded by default, minimum with shortest=True)
    and ties go to the candidate the walk recorded first.
    """
    distances = ancestor_distances(store, current, shortest=shortest)
    other_set = ancestors(store, other)
    common = [h for h in distances if h in other_set]
    dominated: Set[str] = set()
    for h in common:
        dominated.update(get_commit_parents(store, h))
    candidates = [h for h in common if h not in dominated]
    if not candidates:
        raise CorruptRepositoryError(
            f"commits {current[:7]} and {other[:7]} share no ancestor"
        )
    best = min(candidates, key=distances.__getitem__)
    logger.debug(
        "split point of %s and %s: %s (distance %d, %d candidates)",
        current[:7],
        other[:7],
        best[:7],
        distances[best],
        len(candidates),
    )
    return best


def classify_path(split: Optional[str], current: Optional[str], other: Optional[str]) -> str:
    """Decide what a merge does with one path, given its blob hash at split, current and other.

    None means the path is absent on that side. Returns one of CONFLICT,
    REMOVE, TAKE_OTHER, KEEP_CURRENT, ADD.
    """
    if split is not None:
        current_changed = current != split
        other_changed = other != split
        if current is not None and other is not None:
            if current_changed and other_changed and current != other:
                return CONFLICT
        elif current is not None:
            if current_changed:
                return CONFLICT
        elif other is not None:
            if other_changed:
                return CONFLICT
        if not current_changed:
            if other is None:
                return REMOVE
            if other_changed:
                return TAKE_OTHER
        return KEEP_CURRENT
    if current is not None and other is not None and current != other:
        return CONFLICT
    if current is None and other is not None:
        return ADD
    return KEEP_CURRENT


def conflict_content(current: Optional[bytes], other: Optional[bytes]) -> bytes:
    """Both sides wrapped in conflict markers; an absent side contributes nothing."""
    return CONFLICT_START + (current or b"") + CONFLICT_SEPARATOR + (other or b"") + CONFLICT_END


def merge_trackers(
    split_tracker: Mapping[str, str],
    current_tracker: Mapping[str, str],
    other_tracker: Mapping[str, str],
    read_blob: Callable[[str], bytes],
) -> MergeOutcome:
    """Combine three trackers into the merged tracker. Nothing is written.

    read_blob loads the contents of both sides of a conflicting path.
    """
    outcome = MergeOutcome(tracker=dict(current_tracker))
    paths = sorted(set(split_tracker) | set(current_tracker) | set(other_tracker))
    for path in paths:
        s = split_tracker.get(path)
        c = current_tracker.get(path)
        o = other_tracker.get(path)
        action = classify_path(s, c, o)
        logger.debug("merge %s: %s", path, action)
        if action == CONFLICT:
            content = conflict_content(
                read_blob(c) if c is not None else None,
                read_blob(o) if o is not None else None,
            )
            sha = Blob(content).hash_id()
            outcome.new_blobs[sha] = content
            outcome.tracker[path] = sha
            outcome.conflicts.append(path)
        elif action == REMOVE:
            outcome.tracker.pop(path, None)
        elif action in (TAKE_OTHER, ADD) and o is not None:
            outcome.tracker[path] = o
    return outcome
