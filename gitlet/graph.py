"""Commit graph helpers: parents, first-parent iteration, ancestry walks with distances."""

from __future__ import annotations

from collections import deque
from typing import Dict, Generator, List, Set, Tuple

from .objects import Commit
from .objectstore import ObjectStore

# Distance added when stepping along an edge. The merge edge costs one more than
# the primary edge, so a merge parent sits one step behind the primary parent.
PRIMARY_EDGE_COST = 1
MERGE_EDGE_COST = 2


def get_commit_parents(store: ObjectStore, commit_hash: str) -> List[str]:
    """Load commit and return its parent hashes, primary first."""
    return store.load_referenced_commit(commit_hash).parent_hashes


def iter_first_parent(
    store: ObjectStore, start_hash: str
) -> Generator[Tuple[str, Commit], None, None]:
    """Walk the primary-parent chain from start_hash down to the root. Yields (hash, commit)."""
    h = start_hash
    while h:
        c = store.load_referenced_commit(h)
        yield h, c
        h = c.parent_hash


def ancestor_distances(store: ObjectStore, start_hash: str, shortest: bool = False) -> Dict[str, int]:
    """Map every ancestor of start_hash (itself included, at 0) to a distance from it.

    Each visited commit at walk distance d records its primary parent at
    d + PRIMARY_EDGE_COST and its merge parent at d + MERGE_EDGE_COST. A merge
    parent's chain is walked to the root before the primary chain continues.

    With shortest=False the first distance recorded for a commit is kept, even
    if a later path is shorter; with shortest=True the minimum is kept. The
    returned dict is in recording order.
    """
    distances: Dict[str, int] = {start_hash: 0}
    # walk distance at which each commit was last expanded
    expanded: Dict[str, int] = {}
    stack: List[Tuple[str, int]] = [(start_hash, 0)]

    def record(h: str, d: int) -> None:
        if h not in distances:
            distances[h] = d
        elif shortest and d < distances[h]:
            distances[h] = d

    while stack:
        h, d = stack.pop()
        if h in expanded and (not shortest or expanded[h] <= d):
            continue
        expanded[h] = d
        parents = get_commit_parents(store, h)
        if not parents:
            continue
        primary = parents[0]
        record(primary, d + PRIMARY_EDGE_COST)
        stack.append((primary, d + PRIMARY_EDGE_COST))
        if len(parents) > 1:
            merged = parents[1]
            record(merged, d + MERGE_EDGE_COST)
            # pushed last so the merge chain is walked before the primary chain continues
            stack.append((merged, d + MERGE_EDGE_COST))
    return distances


def ancestors(store: ObjectStore, start_hash: str) -> Set[str]:
    """Collect start_hash and all its ancestors over primary and merge edges (BFS)."""
    result: Set[str] = set()
    queue: deque[str] = deque([start_hash])
    while queue:
        h = queue.popleft()
        if h in result:
            continue
        result.add(h)
        for p in get_commit_parents(store, h):
            if p not in result:
                queue.append(p)
    return result


def is_ancestor(store: ObjectStore, anc: str, desc: str) -> bool:
    """Return True if anc is reachable from desc via parent links (a commit is its own ancestor)."""
    return anc in ancestors(store, desc)
