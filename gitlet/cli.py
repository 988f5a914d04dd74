"""CLI: argparse and command dispatch."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .errors import CorruptRepositoryError, GitletError, IncorrectOperandsError
from .porcelain import (
    add,
    branch,
    checkout_branch,
    checkout_file,
    commit,
    config_get,
    config_list,
    config_set,
    config_unset,
    find,
    global_log,
    init,
    log,
    merge,
    reset,
    rm,
    rm_branch,
    status,
)
from .repo import Repository

COMMANDS = (
    "init",
    "add",
    "commit",
    "rm",
    "log",
    "global-log",
    "find",
    "status",
    "checkout",
    "branch",
    "rm-branch",
    "reset",
    "merge",
    "config",
)


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that reports bad operands as a gitlet error instead of exiting."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise IncorrectOperandsError()


def _repo() -> Repository:
    return Repository(Path.cwd())


def cmd_init(_: argparse.Namespace) -> int:
    init(_repo())
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    add(_repo(), args.path)
    return 0


def cmd_commit(args: argparse.Namespace) -> int:
    commit(_repo(), args.message)
    return 0


def cmd_rm(args: argparse.Namespace) -> int:
    rm(_repo(), args.path)
    return 0


def cmd_log(_: argparse.Namespace) -> int:
    log(_repo())
    return 0


def cmd_global_log(_: argparse.Namespace) -> int:
    global_log(_repo())
    return 0


def cmd_find(args: argparse.Namespace) -> int:
    find(_repo(), args.message)
    return 0


def cmd_status(_: argparse.Namespace) -> int:
    status(_repo())
    return 0


def cmd_checkout(operands: List[str]) -> int:
    """checkout -- <file> | checkout <commit> -- <file> | checkout <branch>.

    Parsed by hand: argparse consumes the "--" separator.
    """
    repo = _repo()
    if len(operands) == 2 and operands[0] == "--":
        checkout_file(repo, operands[1])
    elif len(operands) == 3 and operands[1] == "--":
        checkout_file(repo, operands[2], commit_id=operands[0])
    elif len(operands) == 1 and operands[0] != "--":
        checkout_branch(repo, operands[0])
    else:
        raise IncorrectOperandsError()
    return 0


def cmd_branch(args: argparse.Namespace) -> int:
    branch(_repo(), args.name)
    return 0


def cmd_rm_branch(args: argparse.Namespace) -> int:
    rm_branch(_repo(), args.name)
    return 0


def cmd_reset(args: argparse.Namespace) -> int:
    reset(_repo(), args.commit)
    return 0


def cmd_merge(args: argparse.Namespace) -> int:
    merge(_repo(), args.name)
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    repo = _repo()
    count = sum([args.get, args.config_set, args.unset, args.list])
    if count != 1:
        raise GitletError("exactly one of --get, --set, --unset, --list required")
    if args.get:
        if not args.key:
            raise GitletError("--get requires <key>")
        config_get(repo, args.key)
    elif args.config_set:
        if not args.key or args.value is None:
            raise GitletError("--set requires <key> <value>")
        config_set(repo, args.key, args.value)
    elif args.unset:
        if not args.key:
            raise GitletError("--unset requires <key>")
        config_unset(repo, args.key)
    else:
        config_list(repo)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="gitlet",
        description="A minimal local version-control system (init, add, commit, branch, checkout, merge).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug records to stderr")
    sub = parser.add_subparsers(dest="command", help="Commands")

    sub.add_parser("init", help="Initialize a new repository")

    p_add = sub.add_parser("add", help="Stage a file for addition")
    p_add.add_argument("path", help="File to add")

    p_commit = sub.add_parser("commit", help="Commit the staged changes")
    p_commit.add_argument("message", help="Commit message")

    p_rm = sub.add_parser("rm", help="Unstage a file, or stage a tracked file for removal")
    p_rm.add_argument("path", help="File to remove")

    sub.add_parser("log", help="Show first-parent history of the current branch")
    sub.add_parser("global-log", help="Show every commit ever made")

    p_find = sub.add_parser("find", help="Print ids of commits with the given message")
    p_find.add_argument("message", help="Exact commit message")

    sub.add_parser("status", help="Show branches, staged, removed, modified and untracked files")

    # checkout is dispatched before argparse; registered for help output only
    sub.add_parser(
        "checkout",
        help="checkout -- <file> | checkout <commit> -- <file> | checkout <branch>",
    )

    p_branch = sub.add_parser("branch", help="Create a branch at the current head")
    p_branch.add_argument("name", help="Branch name")

    p_rm_branch = sub.add_parser("rm-branch", help="Delete a branch pointer")
    p_rm_branch.add_argument("name", help="Branch name")

    p_reset = sub.add_parser("reset", help="Check out a commit and move the current branch to it")
    p_reset.add_argument("commit", help="Commit id (may be abbreviated)")

    p_merge = sub.add_parser("merge", help="Merge a branch into the current branch")
    p_merge.add_argument("name", help="Branch to merge")

    p_config = sub.add_parser("config", help="Read or write config (.gitlet/config)")
    p_config.add_argument("--get", action="store_true", help="Get value for key")
    p_config.add_argument("--set", dest="config_set", action="store_true", help="Set key to value")
    p_config.add_argument("--unset", action="store_true", help="Unset key")
    p_config.add_argument("--list", action="store_true", help="List all key=value")
    p_config.add_argument("key", nargs="?", default=None, help="Config key (section.option)")
    p_config.add_argument("value", nargs="?", default=None, help="Value (for --set)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    verbose = False
    while argv and argv[0] in ("-v", "--verbose"):
        verbose = True
        argv.pop(0)
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not argv:
        print("Please enter a command.")
        return 1
    if argv[0] not in COMMANDS:
        print("No command with that name exists.")
        return 1

    handlers = {
        "init": cmd_init,
        "add": cmd_add,
        "commit": cmd_commit,
        "rm": cmd_rm,
        "log": cmd_log,
        "global-log": cmd_global_log,
        "find": cmd_find,
        "status": cmd_status,
        "branch": cmd_branch,
        "rm-branch": cmd_rm_branch,
        "reset": cmd_reset,
        "merge": cmd_merge,
        "config": cmd_config,
    }
    try:
        if argv[0] == "checkout":
            return cmd_checkout(argv[1:])
        args = build_parser().parse_args(argv)
        return handlers[args.command](args) or 0
    except CorruptRepositoryError as e:
        print(f"fatal: {e}")
        return 2
    except GitletError as e:
        print(e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
