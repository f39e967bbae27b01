from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

DEFAULT_ARCHIVE_NAME = "project.zip"

STATUS_IDLE = "idle"
STATUS_LOADING = "loading"
STATUS_READY = "ready"
STATUS_ERROR = "error"


@dataclass(frozen=True)
class VirtualFile:
    path: str
    content: str
    is_binary: bool = False  # reserved; archives are always decoded as text


Snapshot = Dict[str, VirtualFile]


@dataclass(frozen=True)
class ProjectData:
    """One row of the remote project listing."""

    id: str
    files: List[str] = field(default_factory=list)

    @property
    def archive_name(self) -> str:
        return self.files[0] if self.files else DEFAULT_ARCHIVE_NAME


@dataclass
class ProjectState:
    id: str = ""
    files: Snapshot = field(default_factory=dict)
    status: str = STATUS_IDLE
    error: Optional[str] = None
