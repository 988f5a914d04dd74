"""Constants for gitlet: metadata layout, default branch, messages, conflict markers."""

from __future__ import annotations

# Metadata directory at the repository root
GITLET_DIR = ".gitlet"

# Sub-stores and serialized state under .gitlet
COMMITS_DIR = "commits"
BLOBS_DIR = "blobs"
INDEX_FILENAME = "index"
BRANCHES_FILENAME = "branches"
HEAD_FILE = "HEAD"
CONFIG_FILENAME = "config"

# Every repository starts on this branch with the same root commit
DEFAULT_BRANCH = "master"
INITIAL_COMMIT_MESSAGE = "initial commit"
INITIAL_COMMIT_TIMESTAMP = 0

# Minimum prefix length for abbreviated commit ids
MIN_PREFIX_LEN = 4

# SHA-1 hex length
SHA1_HEX_LEN = 40

# Conflict markers written into merged files
CONFLICT_START = b"<<<<<<< HEAD\n"
CONFLICT_SEPARATOR = b"=======\n"
CONFLICT_END = b">>>>>>>\n"

# Ancestor-distance policies for split point selection (merge.splitdistance)
SPLIT_DISTANCE_FIRST = "first"
SPLIT_DISTANCE_SHORTEST = "shortest"

# Log date format (e.g. Thu Jan 01 00:00:00 1970 +0000)
LOG_DATE_FORMAT = "%a %b %d %H:%M:%S %Y %z"
