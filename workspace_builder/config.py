from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

DEFAULT_API_BASE = "http://localhost:8000"
DEFAULT_EXPORT_DIR = "~/Downloads/Projects"


def _clean_env(s: Optional[str]) -> Optional[str]:
    if s is None:
        return None
    s = s.strip()
    if (s.startswith('"') and s.endswith('"')) or (s.startswith("'") and s.endswith("'")):
        s = s[1:-1]
    return s.strip() or None


def _env_float(name: str, default: float) -> float:
    try:
        v = float(_clean_env(os.getenv(name)) or default)
        return v if v > 0 else default
    except ValueError:
        return default


def _env_true(name: str, default: str = "1") -> bool:
    return (_clean_env(os.getenv(name)) or default).lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """
    Runtime settings, env-only.

    ENV (optional):
      - PROJECTS_API_BASE            (default http://localhost:8000)
      - PROJECTS_HTTP_TIMEOUT        seconds (default 60)
      - PROJECTS_SKIP_NGROK_WARNING  1/0 (default 1)
      - WORKSPACE_EXPORT_DIR         (default ~/Downloads/Projects)
      - WORKSPACE_LOG_FILE / WORKSPACE_DEBUG=1 are read by logsink directly
    """

    api_base: str = DEFAULT_API_BASE
    http_timeout: float = 60.0
    skip_ngrok_warning: bool = True
    export_dir: Path = Path(DEFAULT_EXPORT_DIR).expanduser()

    @classmethod
    def from_env(cls) -> "Settings":
        base = _clean_env(os.getenv("PROJECTS_API_BASE")) or DEFAULT_API_BASE
        timeout = _env_float("PROJECTS_HTTP_TIMEOUT", 60.0)
        export_dir = _clean_env(os.getenv("WORKSPACE_EXPORT_DIR")) or DEFAULT_EXPORT_DIR
        return cls(
            api_base=base.rstrip("/"),
            http_timeout=timeout,
            skip_ngrok_warning=_env_true("PROJECTS_SKIP_NGROK_WARNING", "1"),
            export_dir=Path(export_dir).expanduser(),
        )

    def request_headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        # The tunnel in front of the project service serves an HTML interstitial otherwise
        if self.skip_ngrok_warning:
            headers["ngrok-skip-browser-warning"] = "true"
        return headers
