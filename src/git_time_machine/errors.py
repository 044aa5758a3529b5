"""Error taxonomy for git-time-machine."""


class GitTimeMachineError(Exception):
    """Base class for all errors raised by git-time-machine."""


class AcquisitionError(GitTimeMachineError):
    """The working directory for a session could not be established."""


class FetchError(GitTimeMachineError):
    """Cloning a remote repository did not complete."""


class QueryError(GitTimeMachineError):
    """A read-only git query failed (bad revision, not a repository, …)."""


class CleanupWarning(UserWarning):
    """A temporary clone could not be removed. Never fatal."""
