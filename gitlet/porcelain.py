"""Porcelain commands: init, add, commit, rm, log, find, status, branch, checkout, reset, merge, config."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from . import config
from .errors import (
    CurrentBranchError,
    EmptyMessageError,
    FileMissingError,
    FileNotInCommitError,
    GitletError,
    MergeError,
    NoSuchBranchError,
    NothingToCommitError,
    NothingToRemoveError,
    UncommittedChangesError,
)
from .graph import iter_first_parent
from .merge import merge_trackers, split_point
from .objects import Blob, Commit
from .repo import Repository
from .util import format_timestamp, read_bytes, remove_file_and_empty_parents

logger = logging.getLogger(__name__)

MERGE_ANCESTOR = "ancestor"
MERGE_FAST_FORWARD = "fast_forward"
MERGE_COMMITTED = "merged"


@dataclass
class MergeResult:
    """Result of merge: what happened, the resulting head commit and any conflicting paths."""

    status: str
    commit: Optional[str] = None
    conflicts: List[str] = field(default_factory=list)

    @property
    def merge_conflict(self) -> bool:
        return bool(self.conflicts)


def init(repo: Repository) -> str:
    """Create the repository. Return the root commit hash."""
    return repo.init()


def add(repo: Repository, path: str) -> None:
    """Stage the working copy of path for addition, or unstage it if it matches the head."""
    repo.require_repo()
    full = repo.safe_path(path)
    if not full.is_file():
        raise FileMissingError()
    rel = repo.rel_path(path)
    state = repo.load_state()
    content = read_bytes(full)
    sha = Blob(content).hash_id()
    if repo.head_tracker(state).get(rel) == sha:
        state.staging.unstage(rel)
    else:
        repo.store.put(content)
        state.staging.stage_addition(rel, sha)
    repo.save_state(state)


def commit(repo: Repository, message: str) -> str:
    """Commit the staged changes on the current branch. Return the new commit hash."""
    repo.require_repo()
    if not message or not message.strip():
        raise EmptyMessageError()
    state = repo.load_state()
    if state.staging.is_empty():
        raise NothingToCommitError()
    parent = state.branches.head()
    tracker = state.staging.apply_to(repo.head_tracker(state))
    commit_hash = repo.store.store_commit(Commit(message, parent, tracker))
    state.staging.clear()
    state.branches.move_current(commit_hash)
    repo.save_state(state)
    logger.debug("committed %s on %s", commit_hash[:7], state.branches.current)
    return commit_hash


def rm(repo: Repository, path: str) -> None:
    """Unstage path; if the head tracks it, stage its removal and delete the working copy."""
    repo.require_repo()
    rel = repo.rel_path(path)
    state = repo.load_state()
    tracked = repo.head_tracker(state).get(rel)
    if rel not in state.staging.additions and tracked is None:
        raise NothingToRemoveError()
    state.staging.unstage(rel)
    if tracked is not None:
        state.staging.stage_removal(rel, tracked)
        remove_file_and_empty_parents(repo.path, rel)
    repo.save_state(state)


def _print_log_entry(commit_hash: str, c: Commit) -> None:
    print("===")
    print(f"commit {commit_hash}")
    if c.is_merge():
        parents = c.parent_hashes
        print(f"Merge: {parents[0][:7]} {parents[1][:7]}")
    print(f"Date: {format_timestamp(c.timestamp)}")
    print(c.message)
    print()


def log(repo: Repository) -> None:
    """Print first-parent history from the current head."""
    repo.require_repo()
    state = repo.load_state()
    for h, c in iter_first_parent(repo.store, state.branches.head()):
        _print_log_entry(h, c)


def global_log(repo: Repository) -> None:
    """Print every stored commit, in no particular order."""
    repo.require_repo()
    for h, c in repo.store.iter_commits():
        _print_log_entry(h, c)


def find(repo: Repository, message: str) -> List[str]:
    """Print and return ids of commits whose message is exactly message."""
    repo.require_repo()
    found = [h for h, c in repo.store.iter_commits() if c.message == message]
    if not found:
        raise GitletError("Found no commit with that message.")
    for h in found:
        print(h)
    return found


def status(repo: Repository) -> None:
    """Print branches, staged and removed files, unstaged modifications and untracked files."""
    repo.require_repo()
    state = repo.load_state()
    staging = state.staging
    head = repo.head_tracker(state)
    working = repo.working_hashes()

    modified: List[str] = []
    for path, sha in head.items():
        if path in staging.additions or path in staging.removals:
            continue
        if path not in working:
            modified.append(f"{path} (deleted)")
        elif working[path] != sha:
            modified.append(f"{path} (modified)")
    for path, sha in staging.additions.items():
        if path not in working:
            modified.append(f"{path} (deleted)")
        elif working[path] != sha:
            modified.append(f"{path} (modified)")

    untracked = [
        p
        for p in working
        if p not in staging.additions and (p not in head or p in staging.removals)
    ]

    print("=== Branches ===")
    for name in state.branches.names():
        mark = "*" if name == state.branches.current else ""
        print(f"{mark}{name}")
    print()
    print("=== Staged Files ===")
    for p in sorted(staging.additions):
        print(p)
    print()
    print("=== Removed Files ===")
    for p in sorted(staging.removals):
        print(p)
    print()
    print("=== Modifications Not Staged For Commit ===")
    for entry in sorted(modified):
        print(entry)
    print()
    print("=== Untracked Files ===")
    for p in sorted(untracked):
        print(p)
    print()


def branch(repo: Repository, name: str) -> None:
    """Create branch name at the current head."""
    repo.require_repo()
    state = repo.load_state()
    state.branches.create(name, state.branches.head())
    repo.save_state(state)


def rm_branch(repo: Repository, name: str) -> None:
    """Delete branch pointer name (its commits are kept)."""
    repo.require_repo()
    state = repo.load_state()
    state.branches.delete(name)
    repo.save_state(state)


def checkout_file(repo: Repository, path: str, commit_id: Optional[str] = None) -> None:
    """Overwrite the working copy of path with its version in commit_id (default: head). Not staged."""
    repo.require_repo()
    state = repo.load_state()
    if commit_id is None:
        c = repo.head_commit(state)
    else:
        c = repo.store.load_commit(repo.store.resolve_commit_id(commit_id))
    rel = repo.rel_path(path)
    blob_hash = c.tracker.get(rel)
    if blob_hash is None:
        raise FileNotInCommitError()
    repo.write_tracked_file(rel, blob_hash)


def checkout_branch(repo: Repository, name: str) -> None:
    """Switch to branch name and make the working area match its head."""
    repo.require_repo()
    state = repo.load_state()
    if not state.branches.exists(name):
        raise NoSuchBranchError("No such branch exists.")
    if name == state.branches.current:
        raise CurrentBranchError("No need to checkout the current branch.")
    target_hash = state.branches.resolve(name)
    head = repo.head_tracker(state)
    target = repo.store.load_referenced_commit(target_hash).tracker
    repo.check_untracked(head, target)
    repo.checkout_tracker(head, target)
    state.staging.clear()
    state.branches.switch(name)
    repo.save_state(state)


def reset(repo: Repository, commit_id: str) -> None:
    """Check out every file of commit_id and move the current branch to it."""
    repo.require_repo()
    state = repo.load_state()
    target_hash = repo.store.resolve_commit_id(commit_id)
    head = repo.head_tracker(state)
    target = repo.store.load_commit(target_hash).tracker
    repo.check_untracked(head, target, state.staging)
    repo.checkout_tracker(head, target)
    state.staging.clear()
    state.branches.move_current(target_hash)
    repo.save_state(state)


def merge(repo: Repository, name: str) -> MergeResult:
    """Merge branch name into the current branch.

    Every precondition is checked before anything is written. If the given
    branch is already an ancestor nothing changes; if the current head is the
    split point the current branch is fast-forwarded. Otherwise a merge commit
    is created even when some paths conflict.
    """
    repo.require_repo()
    state = repo.load_state()
    other_hash = state.branches.resolve(name)
    if not state.staging.is_empty():
        raise UncommittedChangesError()
    store = repo.store
    current_name = state.branches.current
    current_hash = state.branches.head()
    current = store.load_referenced_commit(current_hash)
    other = store.load_referenced_commit(other_hash)
    repo.check_untracked(current.tracker, other.tracker)
    if name == current_name:
        raise MergeError("Cannot merge a branch with itself.")

    split_hash = split_point(
        store, current_hash, other_hash, shortest=config.use_shortest_split_distance(repo)
    )
    if split_hash == other_hash:
        print("Given branch is an ancestor of the current branch.")
        return MergeResult(status=MERGE_ANCESTOR, commit=current_hash)
    if split_hash == current_hash:
        repo.checkout_tracker(current.tracker, other.tracker)
        state.staging.clear()
        state.branches.move_current(other_hash)
        repo.save_state(state)
        print("Current branch fast-forwarded.")
        return MergeResult(status=MERGE_FAST_FORWARD, commit=other_hash)

    split = store.load_referenced_commit(split_hash)
    outcome = merge_trackers(split.tracker, current.tracker, other.tracker, store.read_tracked_blob)
    for content in outcome.new_blobs.values():
        store.put(content)
    repo.checkout_tracker(current.tracker, outcome.tracker, prune_untracked=True)
    merge_commit = Commit(
        f"Merged {name} into {current_name}.",
        current_hash,
        outcome.tracker,
        merge_parent_hash=other_hash,
    )
    merge_hash = store.store_commit(merge_commit)
    state.staging.clear()
    state.branches.move_current(merge_hash)
    repo.save_state(state)
    logger.debug("merged %s into %s: %s (%d conflicts)", name, current_name, merge_hash[:7], len(outcome.conflicts))
    if outcome.conflicts:
        print("Encountered a merge conflict.")
    return MergeResult(status=MERGE_COMMITTED, commit=merge_hash, conflicts=outcome.conflicts)


def config_get(repo: Repository, key: str) -> None:
    """Print config value for key. Raises GitletError if key not found."""
    repo.require_repo()
    val = config.get_value(repo, key)
    if val is None:
        raise GitletError(f"Key not found: {key}")
    print(val)


def config_set(repo: Repository, key: str, value: str) -> None:
    """Set config key to value."""
    repo.require_repo()
    config.set_value(repo, key, value)


def config_unset(repo: Repository, key: str) -> None:
    """Unset config key. Raises GitletError if key not found."""
    repo.require_repo()
    if not config.unset_value(repo, key):
        raise GitletError(f"Key not found: {key}")


def config_list(repo: Repository) -> None:
    """Print key=value lines sorted by key."""
    repo.require_repo()
    for k, v in config.list_values(repo):
        print(f"{k}={v}")
