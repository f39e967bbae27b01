# tools/ui_utils.py
from __future__ import annotations

import hashlib

__all__ = ["button_key", "tree_indent"]


def button_key(*parts: object) -> str:
    """
    Build a deterministic, collision-resistant Streamlit key from any number of parts.
    Examples:
      button_key("file", "src/main.tsx")
      button_key("project", "abc123")
    """
    strs = [str(p) for p in parts if p is not None]
    if not strs:
        base = "key"
    else:
        base = strs[0].lower().replace(" ", "_")
    h = hashlib.sha1(("||".join(strs)).encode("utf-8")).hexdigest()[:10]
    return f"btn::{base}::{h}"


def tree_indent(depth: int) -> str:
    # non-breaking spaces survive Streamlit's markdown whitespace collapsing
    return "\u00a0" * (depth * 4)
