"""Custom exceptions for gitlet."""

from __future__ import annotations


class GitletError(Exception):
    """Base exception for gitlet. The message is what the user sees."""

    pass


class NotARepositoryError(GitletError):
    """Raised when not in an initialized gitlet directory."""

    def __init__(self, message: str = "Not in an initialized Gitlet directory.") -> None:
        super().__init__(message)


class RepositoryExistsError(GitletError):
    """Raised by init when .gitlet already exists."""

    def __init__(
        self,
        message: str = "A Gitlet version-control system already exists in the current directory.",
    ) -> None:
        super().__init__(message)


class ObjectNotFoundError(GitletError):
    """Raised when an object is not found in a store."""

    pass


class CorruptRepositoryError(GitletError):
    """Raised when stored data references a commit or blob that is missing."""

    pass


class FileMissingError(GitletError):
    """Raised when add is given a path that does not exist."""

    def __init__(self, message: str = "File does not exist.") -> None:
        super().__init__(message)


class EmptyMessageError(GitletError):
    """Raised when commit is given a blank message."""

    def __init__(self, message: str = "Please enter a commit message.") -> None:
        super().__init__(message)


class NothingToCommitError(GitletError):
    """Raised when commit is called with an empty index."""

    def __init__(self, message: str = "No changes added to the commit.") -> None:
        super().__init__(message)


class NothingToRemoveError(GitletError):
    """Raised when rm is given a path that is neither staged nor tracked."""

    def __init__(self, message: str = "No reason to remove the file.") -> None:
        super().__init__(message)


class BranchExistsError(GitletError):
    """Raised when creating a branch whose name is taken."""

    def __init__(self, message: str = "A branch with that name already exists.") -> None:
        super().__init__(message)


class NoSuchBranchError(GitletError):
    """Raised when a branch name does not resolve."""

    def __init__(self, message: str = "A branch with that name does not exist.") -> None:
        super().__init__(message)


class CurrentBranchError(GitletError):
    """Raised when an operation is not allowed on the current branch."""

    pass


class NoSuchCommitError(GitletError):
    """Raised when a (possibly abbreviated) commit id does not resolve."""

    def __init__(self, message: str = "No commit with that id exists.") -> None:
        super().__init__(message)


class AmbiguousCommitError(GitletError):
    """Raised when an abbreviated commit id matches several commits."""

    pass


class FileNotInCommitError(GitletError):
    """Raised when checkout asks for a path the commit does not track."""

    def __init__(self, message: str = "File does not exist in that commit.") -> None:
        super().__init__(message)


class UncommittedChangesError(GitletError):
    """Raised by merge when the index is not empty."""

    def __init__(self, message: str = "You have uncommitted changes.") -> None:
        super().__init__(message)


class UntrackedFileError(GitletError):
    """Raised when an untracked working file would be overwritten."""

    def __init__(
        self,
        message: str = "There is an untracked file in the way; delete it, or add and commit it first.",
    ) -> None:
        super().__init__(message)


class MergeError(GitletError):
    """Raised when a merge is refused (e.g. merging a branch with itself)."""

    pass


class InvalidConfigKeyError(GitletError):
    """Raised when a config key is invalid (e.g. not section.option)."""

    pass


class IncorrectOperandsError(GitletError):
    """Raised when a command gets operands it cannot interpret."""

    def __init__(self, message: str = "Incorrect operands.") -> None:
        super().__init__(message)
