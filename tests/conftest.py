from __future__ import annotations

import io
import zipfile
from typing import Dict, Iterable

import pytest

from workspace_builder.models import Snapshot, VirtualFile


def build_zip(files: Dict[str, str], dirs: Iterable[str] = (), compression: int = zipfile.ZIP_DEFLATED) -> bytes:
    bio = io.BytesIO()
    with zipfile.ZipFile(bio, "w", compression=compression) as zf:
        for d in dirs:
            zf.writestr(d.rstrip("/") + "/", "")
        for path, content in files.items():
            zf.writestr(path, content)
    return bio.getvalue()


def snapshot_of(files: Dict[str, str]) -> Snapshot:
    return {p: VirtualFile(path=p, content=c) for p, c in files.items()}


@pytest.fixture
def log_lines():
    lines = []
    return lines


@pytest.fixture
def logger(log_lines):
    return log_lines.append


@pytest.fixture
def react_project() -> Dict[str, str]:
    return {
        "index.html": "<!doctype html><html><head><title>demo</title></head><body><div id=\"root\"></div></body></html>",
        "src/main.tsx": "import { createRoot } from 'react-dom/client';\ncreateRoot(document.getElementById('root')!).render(<p>hi</p>);",
        "src/App.tsx": "export default function App() { return <h1>App</h1>; }",
        "package.json": "{\"name\": \"demo\"}",
    }
