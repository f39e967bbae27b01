# tools/languages.py
from __future__ import annotations

from pathlib import PurePosixPath

LANG_FROM_EXT = {
    ".py": "python",
    ".md": "markdown",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".json": "json",
    ".toml": "toml",
    ".ini": "ini",
    ".xml": "xml",
    ".svg": "xml",
    ".csv": "csv",
    ".html": "html",
    ".htm": "html",
    ".css": "css",
    ".scss": "scss",
    ".sass": "sass",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".jsx": "jsx",
    ".env": "bash",
    ".sh": "bash",
    ".bash": "bash",
    ".zsh": "bash",
    ".sql": "sql",
    ".proto": "protobuf",
    ".dockerfile": "docker",
}


def guess_language(path: str) -> str:
    """Syntax-highlight hint for a snapshot path ("text" when unknown)."""
    p = PurePosixPath(path)
    name = p.name.lower()
    if name == "dockerfile":
        return "docker"
    if name.startswith(".env"):
        return "bash"
    return LANG_FROM_EXT.get(p.suffix.lower(), "text")
