from __future__ import annotations


class SimdirsError(Exception):
    """Base class for errors raised by simdirs."""


class ArgumentError(SimdirsError):
    """Missing or malformed command-line arguments."""


class NotFoundError(SimdirsError):
    """The scan root is missing or cannot be listed as a directory."""


class QueryFailure(SimdirsError):
    """A timestamp or size lookup failed; callers substitute a sentinel."""

    def __init__(self, path: str, cause: OSError) -> None:
        super().__init__(f"{path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause


class DeletionFailure(SimdirsError):
    """One planned directory could not be removed."""

    def __init__(self, path: str, cause: OSError) -> None:
        super().__init__(f"{path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause
