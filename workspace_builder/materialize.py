from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional

from .errors import PartialWriteFailure, UnsupportedEnvironmentError, UserCancelledError
from .logsink import Logger, writeln
from .models import Snapshot
from .sanitize import ensure_under


class DirectoryHandle:
    """
    A granted, writable directory. A name that would climb out of it ("..") is
    refused with ValueError.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser().resolve()

    @property
    def name(self) -> str:
        return self.path.name

    def _child(self, name: str) -> Path:
        return ensure_under(self.path, name)

    def get_directory_handle(self, name: str, create: bool = True) -> "DirectoryHandle":
        target = self._child(name)
        if create:
            target.mkdir(exist_ok=True)
        elif not target.is_dir():
            raise FileNotFoundError(target)
        return DirectoryHandle(target)

    def write_file(self, name: str, content: str) -> Path:
        """Create or overwrite, write the full text, close."""
        target = self._child(name)
        with target.open("w", encoding="utf-8", newline="") as f:
            f.write(content)
        return target


Picker = Callable[[], Optional[DirectoryHandle]]


def directory_picker(dest: Optional[str | Path], create: bool = True) -> Picker:
    """
    Picker for a destination the user typed in. A blank destination counts as a
    dismissed prompt.
    """

    def _pick() -> Optional[DirectoryHandle]:
        if dest is None or not str(dest).strip():
            return None
        p = Path(str(dest).strip()).expanduser()
        if create:
            try:
                p.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise UnsupportedEnvironmentError(f"Cannot use destination folder {p}: {exc}") from exc
        elif not p.is_dir():
            return None
        return DirectoryHandle(p)

    return _pick


def materialize(
    snapshot: Snapshot,
    on_progress: Callable[[str], None],
    picker: Optional[Picker],
    *,
    logger: Logger = writeln,
) -> str:
    """
    Recreate the snapshot under a user-granted directory; returns that directory's name.

    Entries are written one at a time in snapshot order, with one on_progress(path)
    after each completed file. The first failed write aborts: files already written
    stay on disk and later entries are never attempted.
    """
    if picker is None:
        raise UnsupportedEnvironmentError("Writing to local folders is not supported here.")

    root = picker()
    if root is None:
        raise UserCancelledError("Operation cancelled by the user.")

    logger(f"[materialize] folder selected: {root.name}; writing {len(snapshot)} file(s)")

    written: List[str] = []
    for path, vf in snapshot.items():
        parts = path.split("/")
        try:
            current = root
            for part in parts[:-1]:
                current = current.get_directory_handle(part, create=True)
            current.write_file(parts[-1], vf.content)
        except (OSError, ValueError) as exc:
            logger(f"[materialize] failed: {path} -> {exc}")
            raise PartialWriteFailure(path, written, reason=str(exc)) from exc
        written.append(path)
        on_progress(path)

    logger(f"[materialize] done: {len(written)} file(s) in {root.path}")
    return root.name
