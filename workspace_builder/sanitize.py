from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

_UNSAFE_NAME_RE = re.compile(r"[^A-Za-z0-9._-]+")


def safe_folder_name(name: Optional[str], default: str = "project") -> str:
    """Project id -> something usable as a folder name."""
    s = (name or "").strip().strip("/\\")
    s = _UNSAFE_NAME_RE.sub("_", s).strip("._")
    return s or default


def ensure_under(base: str | Path, rel: str | Path) -> Path:
    """
    Join base + rel, resolve, and assert the result stays under base.
    Accepts strings, returns Path.
    """
    base_p = Path(base).expanduser().resolve()
    target = (base_p / Path(rel)).resolve()
    if not target.is_relative_to(base_p):
        raise ValueError(f"Path escapes base: {target} !< {base_p}")
    return target
