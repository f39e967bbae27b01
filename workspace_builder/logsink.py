from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Optional

Logger = Callable[[str], None]


def _log_sink() -> Optional[Path]:
    p = os.getenv("WORKSPACE_LOG_FILE", "").strip()
    if not p:
        return None
    path = Path(p)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def writeln(line: str) -> None:
    """Default logger: echo when WORKSPACE_DEBUG=1, append to WORKSPACE_LOG_FILE when set."""
    if os.getenv("WORKSPACE_DEBUG", "0") == "1":
        print(line, flush=True)
    dest = _log_sink()
    if dest:
        with dest.open("a", encoding="utf-8") as f:
            f.write(line + "\n")
