from __future__ import annotations

from typing import List, Optional


class WorkspaceError(Exception):
    """Base class for everything the workspace core raises."""


class ArchiveFetchError(WorkspaceError):
    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class ArchiveDecodeError(WorkspaceError):
    pass


class ProjectServerUnavailableError(WorkspaceError):
    pass


class PathConflictError(WorkspaceError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Path is both a file and a directory: {path}")
        self.path = path


class UnsupportedEnvironmentError(WorkspaceError):
    pass


class UserCancelledError(WorkspaceError):
    pass


class PartialWriteFailure(WorkspaceError):
    """
    A write failed mid-export. Files listed in `written` stay on disk;
    nothing after `path` was attempted.
    """

    def __init__(self, path: str, written: List[str], reason: str = "") -> None:
        msg = f"Failed writing {path}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
        self.path = path
        self.written = list(written)
