from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional

from .errors import WorkspaceError
from .ingest import fetch_and_ingest
from .logsink import Logger, writeln
from .models import (
    STATUS_ERROR,
    STATUS_LOADING,
    STATUS_READY,
    ProjectData,
    ProjectState,
    Snapshot,
    VirtualFile,
)
from .tree import toggle_folder

if TYPE_CHECKING:
    from tools.project_client import ProjectClient


@dataclass(frozen=True)
class ProgressEntry:
    id: int
    message: str


@dataclass
class ProgressLog:
    entries: List[ProgressEntry] = field(default_factory=list)
    _ids: Iterator[int] = field(default_factory=lambda: itertools.count(1), repr=False)

    def add(self, message: str) -> ProgressEntry:
        entry = ProgressEntry(id=next(self._ids), message=message)
        self.entries.append(entry)
        return entry

    def clear(self) -> None:
        self.entries.clear()

    def lines(self) -> List[str]:
        return [e.message for e in self.entries]


class WorkspaceSession:
    """
    The single active workspace. Each selection bumps a token; a load result is
    applied only while its token is still the newest, so a slow download for an
    earlier selection can never overwrite a later one.
    """

    def __init__(self, logger: Logger = writeln) -> None:
        self.state = ProjectState()
        self.selected_path: Optional[str] = None
        self.expanded: Dict[str, bool] = {}
        self.progress = ProgressLog()
        self._token = 0
        self._log = logger

    @property
    def token(self) -> int:
        return self._token

    def is_current(self, token: int) -> bool:
        return token == self._token

    def begin_selection(self, project: ProjectData) -> int:
        self._token += 1
        self.state = ProjectState(id=project.id, status=STATUS_LOADING)
        self.selected_path = None
        self.expanded = {}
        self._log(f"[session] select {project.id} token={self._token}")
        return self._token

    def apply_result(self, token: int, snapshot: Snapshot) -> bool:
        if not self.is_current(token):
            self._log(f"[session] stale result dropped token={token} current={self._token}")
            return False
        # replaced wholesale
        self.state = ProjectState(id=self.state.id, files=dict(snapshot), status=STATUS_READY)
        return True

    def apply_error(self, token: int, exc: BaseException) -> bool:
        if not self.is_current(token):
            self._log(f"[session] stale error dropped token={token}: {exc}")
            return False
        self.state = ProjectState(id=self.state.id, status=STATUS_ERROR, error=str(exc))
        return True

    async def load_project(self, client: "ProjectClient", project: ProjectData) -> bool:
        """Select, download, ingest, apply. Returns False when a newer selection won and the outcome was dropped."""
        token = self.begin_selection(project)
        try:
            snapshot = await fetch_and_ingest(client, project.id, project.archive_name, logger=self._log)
        except WorkspaceError as exc:
            self._log(f"[session] load failed {project.id}: {exc}")
            return self.apply_error(token, exc)
        return self.apply_result(token, snapshot)

    def select_file(self, path: Optional[str]) -> None:
        if path is not None and path not in self.state.files:
            raise KeyError(path)
        self.selected_path = path

    def toggle_folder(self, path: str) -> None:
        self.expanded = toggle_folder(self.expanded, path)

    @property
    def selected_file(self) -> Optional[VirtualFile]:
        if self.selected_path is None:
            return None
        return self.state.files.get(self.selected_path)
