"""Tests for porcelain commands: init, add, commit, rm, log, find, status, branch, checkout, reset."""

import io
import sys
import tempfile
import unittest
from pathlib import Path

from gitlet.errors import (
    BranchExistsError,
    CurrentBranchError,
    EmptyMessageError,
    FileMissingError,
    FileNotInCommitError,
    GitletError,
    NoSuchBranchError,
    NoSuchCommitError,
    NotARepositoryError,
    NothingToCommitError,
    NothingToRemoveError,
    RepositoryExistsError,
    UntrackedFileError,
)
from gitlet.objects import Blob, Commit
from gitlet.porcelain import (
    add,
    branch,
    checkout_branch,
    checkout_file,
    commit,
    find,
    global_log,
    init,
    log,
    reset,
    rm,
    rm_branch,
    status,
)
from gitlet.repo import Repository
from gitlet.util import format_timestamp


def capture(fn, *args, **kwargs) -> str:
    out = io.StringIO()
    old_stdout = sys.stdout
    sys.stdout = out
    try:
        fn(*args, **kwargs)
    finally:
        sys.stdout = old_stdout
    return out.getvalue()


class PorcelainTestCase(unittest.TestCase):
    def setUp(self) -> None:
        d = tempfile.mkdtemp(prefix="gitlet_porcelain_")
        self.repo_dir = Path(d)
        self.repo = Repository(str(self.repo_dir))
        self.root = init(self.repo)

    def write(self, name: str, content: str) -> None:
        p = self.repo_dir / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content)

    def read(self, name: str) -> str:
        return (self.repo_dir / name).read_text()

    def state(self):
        return self.repo.load_state()

    def head(self) -> str:
        return self.state().branches.head()


class TestInit(PorcelainTestCase):
    def test_layout(self) -> None:
        g = self.repo_dir / ".gitlet"
        for name in ("commits", "blobs", "index", "branches", "HEAD", "config"):
            self.assertTrue((g / name).exists(), name)
        self.assertEqual((g / "HEAD").read_text().strip(), "master")

    def test_root_commit_shared_between_repositories(self) -> None:
        other = Repository(tempfile.mkdtemp(prefix="gitlet_porcelain_other_"))
        self.assertEqual(init(other), self.root)
        self.assertEqual(self.root, Commit.initial().hash_id())
        self.assertEqual(self.head(), self.root)

    def test_init_twice(self) -> None:
        with self.assertRaises(RepositoryExistsError) as cm:
            init(self.repo)
        self.assertEqual(
            str(cm.exception),
            "A Gitlet version-control system already exists in the current directory.",
        )

    def test_commands_need_repository(self) -> None:
        bare = Repository(tempfile.mkdtemp(prefix="gitlet_porcelain_bare_"))
        with self.assertRaises(NotARepositoryError) as cm:
            status(bare)
        self.assertEqual(str(cm.exception), "Not in an initialized Gitlet directory.")


class TestAddCommitRm(PorcelainTestCase):
    def test_add_missing_file(self) -> None:
        with self.assertRaises(FileMissingError) as cm:
            add(self.repo, "nope.txt")
        self.assertEqual(str(cm.exception), "File does not exist.")

    def test_add_stores_blob_and_stages(self) -> None:
        self.write("a.txt", "hello")
        add(self.repo, "a.txt")
        sha = Blob(b"hello").hash_id()
        self.assertEqual(self.state().staging.additions, {"a.txt": sha})
        self.assertEqual(self.repo.store.get(sha), b"hello")

    def test_add_unchanged_file_unstages(self) -> None:
        self.write("a.txt", "v1")
        add(self.repo, "a.txt")
        commit(self.repo, "v1")
        self.write("a.txt", "v2")
        add(self.repo, "a.txt")
        self.write("a.txt", "v1")
        add(self.repo, "a.txt")
        self.assertTrue(self.state().staging.is_empty())

    def test_add_cancels_removal(self) -> None:
        self.write("a.txt", "v1")
        add(self.repo, "a.txt")
        commit(self.repo, "v1")
        rm(self.repo, "a.txt")
        self.assertEqual(list(self.state().staging.removals), ["a.txt"])
        self.write("a.txt", "v1")
        add(self.repo, "a.txt")
        self.assertTrue(self.state().staging.is_empty())

    def test_commit_moves_branch_and_clears_index(self) -> None:
        self.write("a.txt", "1")
        add(self.repo, "a.txt")
        h = commit(self.repo, "first")
        self.assertEqual(self.head(), h)
        self.assertTrue(self.state().staging.is_empty())
        c = self.repo.store.load_commit(h)
        self.assertEqual(c.parent_hash, self.root)
        self.assertEqual(c.tracker, {"a.txt": Blob(b"1").hash_id()})

    def test_commit_applies_removals(self) -> None:
        self.write("a.txt", "1")
        self.write("b.txt", "2")
        add(self.repo, "a.txt")
        add(self.repo, "b.txt")
        commit(self.repo, "two files")
        rm(self.repo, "a.txt")
        h = commit(self.repo, "drop a")
        self.assertEqual(list(self.repo.store.load_commit(h).tracker), ["b.txt"])

    def test_commit_blank_message(self) -> None:
        self.write("a.txt", "1")
        add(self.repo, "a.txt")
        with self.assertRaises(EmptyMessageError) as cm:
            commit(self.repo, "   ")
        self.assertEqual(str(cm.exception), "Please enter a commit message.")

    def test_commit_nothing_staged(self) -> None:
        with self.assertRaises(NothingToCommitError) as cm:
            commit(self.repo, "empty")
        self.assertEqual(str(cm.exception), "No changes added to the commit.")

    def test_rm_no_reason(self) -> None:
        self.write("a.txt", "1")
        with self.assertRaises(NothingToRemoveError) as cm:
            rm(self.repo, "a.txt")
        self.assertEqual(str(cm.exception), "No reason to remove the file.")

    def test_rm_staged_only_keeps_file(self) -> None:
        self.write("a.txt", "1")
        add(self.repo, "a.txt")
        rm(self.repo, "a.txt")
        self.assertTrue(self.state().staging.is_empty())
        self.assertTrue((self.repo_dir / "a.txt").exists())

    def test_rm_tracked_deletes_file(self) -> None:
        self.write("dir/a.txt", "1")
        add(self.repo, "dir/a.txt")
        commit(self.repo, "nested")
        rm(self.repo, "dir/a.txt")
        self.assertFalse((self.repo_dir / "dir" / "a.txt").exists())
        self.assertEqual(self.state().staging.removals, {"dir/a.txt": Blob(b"1").hash_id()})


class TestLogFind(PorcelainTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.write("a.txt", "1")
        add(self.repo, "a.txt")
        self.c1 = commit(self.repo, "first")

    def test_log_format(self) -> None:
        out = capture(log, self.repo)
        c1 = self.repo.store.load_commit(self.c1)
        expected = (
            f"===\ncommit {self.c1}\nDate: {format_timestamp(c1.timestamp)}\nfirst\n\n"
            f"===\ncommit {self.root}\nDate: {format_timestamp(0)}\ninitial commit\n\n"
        )
        self.assertEqual(out, expected)

    def test_global_log_includes_other_branches(self) -> None:
        branch(self.repo, "side")
        checkout_branch(self.repo, "side")
        self.write("b.txt", "b")
        add(self.repo, "b.txt")
        side = commit(self.repo, "side work")
        checkout_branch(self.repo, "master")
        self.assertNotIn(side, capture(log, self.repo))
        out = capture(global_log, self.repo)
        for h in (self.root, self.c1, side):
            self.assertIn(f"commit {h}", out)

    def test_find(self) -> None:
        out = capture(find, self.repo, "first")
        self.assertEqual(out, f"{self.c1}\n")

    def test_find_none(self) -> None:
        with self.assertRaises(GitletError) as cm:
            find(self.repo, "missing")
        self.assertEqual(str(cm.exception), "Found no commit with that message.")


class TestStatus(PorcelainTestCase):
    def test_empty_repository(self) -> None:
        out = capture(status, self.repo)
        self.assertEqual(
            out,
            "=== Branches ===\n*master\n\n"
            "=== Staged Files ===\n\n"
            "=== Removed Files ===\n\n"
            "=== Modifications Not Staged For Commit ===\n\n"
            "=== Untracked Files ===\n\n",
        )

    def test_all_sections(self) -> None:
        for name in ("goodbye.txt", "junk.txt", "keep.txt", "stale.txt"):
            self.write(name, name)
            add(self.repo, name)
        commit(self.repo, "setup")
        branch(self.repo, "other")
        self.write("wug.txt", "wug")
        add(self.repo, "wug.txt")
        rm(self.repo, "goodbye.txt")
        self.write("junk.txt", "changed")
        (self.repo_dir / "keep.txt").unlink()
        self.write("stale.txt", "staged version")
        add(self.repo, "stale.txt")
        self.write("stale.txt", "edited after add")
        self.write("random.stuff", "?")
        out = capture(status, self.repo)
        self.assertEqual(
            out,
            "=== Branches ===\n*master\nother\n\n"
            "=== Staged Files ===\nstale.txt\nwug.txt\n\n"
            "=== Removed Files ===\ngoodbye.txt\n\n"
            "=== Modifications Not Staged For Commit ===\n"
            "junk.txt (modified)\nkeep.txt (deleted)\nstale.txt (modified)\n\n"
            "=== Untracked Files ===\nrandom.stuff\n\n",
        )


class TestBranches(PorcelainTestCase):
    def test_branch_exists(self) -> None:
        branch(self.repo, "b")
        with self.assertRaises(BranchExistsError):
            branch(self.repo, "b")

    def test_rm_branch(self) -> None:
        branch(self.repo, "b")
        rm_branch(self.repo, "b")
        self.assertFalse(self.state().branches.exists("b"))
        with self.assertRaises(NoSuchBranchError):
            rm_branch(self.repo, "b")

    def test_rm_current_branch(self) -> None:
        with self.assertRaises(CurrentBranchError) as cm:
            rm_branch(self.repo, "master")
        self.assertEqual(str(cm.exception), "Cannot remove the current branch.")


class TestCheckout(PorcelainTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.write("f.txt", "v1")
        add(self.repo, "f.txt")
        self.c1 = commit(self.repo, "v1")
        self.write("f.txt", "v2")
        self.write("g.txt", "g")
        add(self.repo, "f.txt")
        add(self.repo, "g.txt")
        self.c2 = commit(self.repo, "v2")

    def test_checkout_file_from_head(self) -> None:
        self.write("f.txt", "scratch")
        checkout_file(self.repo, "f.txt")
        self.assertEqual(self.read("f.txt"), "v2")
        self.assertTrue(self.state().staging.is_empty())

    def test_checkout_file_from_abbreviated_commit(self) -> None:
        checkout_file(self.repo, "f.txt", commit_id=self.c1[:7])
        self.assertEqual(self.read("f.txt"), "v1")
        self.assertEqual(self.head(), self.c2)

    def test_checkout_file_not_in_commit(self) -> None:
        with self.assertRaises(FileNotInCommitError) as cm:
            checkout_file(self.repo, "g.txt", commit_id=self.c1)
        self.assertEqual(str(cm.exception), "File does not exist in that commit.")

    def test_checkout_file_unknown_commit(self) -> None:
        with self.assertRaises(NoSuchCommitError) as cm:
            checkout_file(self.repo, "f.txt", commit_id="0000000")
        self.assertEqual(str(cm.exception), "No commit with that id exists.")

    def test_checkout_branch(self) -> None:
        branch(self.repo, "old")
        reset(self.repo, self.c1)
        self.write("h.txt", "h")
        add(self.repo, "h.txt")
        checkout_branch(self.repo, "old")
        self.assertEqual(self.state().branches.current, "old")
        self.assertEqual(self.read("f.txt"), "v2")
        self.assertEqual(self.read("g.txt"), "g")
        self.assertTrue(self.state().staging.is_empty())
        checkout_branch(self.repo, "master")
        self.assertEqual(self.read("f.txt"), "v1")
        self.assertFalse((self.repo_dir / "g.txt").exists())

    def test_checkout_branch_errors(self) -> None:
        with self.assertRaises(NoSuchBranchError) as cm:
            checkout_branch(self.repo, "nope")
        self.assertEqual(str(cm.exception), "No such branch exists.")
        with self.assertRaises(CurrentBranchError) as cm2:
            checkout_branch(self.repo, "master")
        self.assertEqual(str(cm2.exception), "No need to checkout the current branch.")

    def test_checkout_branch_untracked_in_the_way(self) -> None:
        branch(self.repo, "old")
        reset(self.repo, self.c1)
        self.write("g.txt", "mine")
        with self.assertRaises(UntrackedFileError) as cm:
            checkout_branch(self.repo, "old")
        self.assertEqual(
            str(cm.exception),
            "There is an untracked file in the way; delete it, or add and commit it first.",
        )
        self.assertEqual(self.state().branches.current, "master")
        self.assertEqual(self.read("g.txt"), "mine")

    def test_checkout_branch_refuses_staged_file_in_the_way(self) -> None:
        branch(self.repo, "feat")
        checkout_branch(self.repo, "feat")
        self.write("new.txt", "theirs")
        add(self.repo, "new.txt")
        commit(self.repo, "theirs")
        checkout_branch(self.repo, "master")
        self.write("new.txt", "my uncommitted work")
        add(self.repo, "new.txt")
        index_before = (self.repo_dir / ".gitlet" / "index").read_bytes()
        with self.assertRaises(UntrackedFileError):
            checkout_branch(self.repo, "feat")
        self.assertEqual(self.read("new.txt"), "my uncommitted work")
        self.assertEqual((self.repo_dir / ".gitlet" / "index").read_bytes(), index_before)
        self.assertIn("new.txt", self.state().staging.additions)
        self.assertEqual(self.state().branches.current, "master")


class TestReset(PorcelainTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.write("f.txt", "v1")
        add(self.repo, "f.txt")
        self.c1 = commit(self.repo, "v1")
        self.write("f.txt", "v2")
        self.write("g.txt", "g")
        add(self.repo, "f.txt")
        add(self.repo, "g.txt")
        self.c2 = commit(self.repo, "v2")

    def test_reset(self) -> None:
        self.write("h.txt", "h")
        add(self.repo, "h.txt")
        reset(self.repo, self.c1[:8])
        self.assertEqual(self.head(), self.c1)
        self.assertEqual(self.read("f.txt"), "v1")
        self.assertFalse((self.repo_dir / "g.txt").exists())
        self.assertTrue(self.state().staging.is_empty())
        self.assertEqual(self.read("h.txt"), "h")

    def test_reset_forward_again(self) -> None:
        reset(self.repo, self.c1)
        reset(self.repo, self.c2)
        self.assertEqual(self.read("g.txt"), "g")

    def test_reset_unknown(self) -> None:
        with self.assertRaises(NoSuchCommitError):
            reset(self.repo, "ffffffffff")

    def test_reset_untracked_in_the_way(self) -> None:
        reset(self.repo, self.c1)
        self.write("g.txt", "untracked")
        with self.assertRaises(UntrackedFileError):
            reset(self.repo, self.c2)
        self.assertEqual(self.head(), self.c1)


if __name__ == "__main__":
    unittest.main()
