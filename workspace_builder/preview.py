"""
Preview synthesis: one self-contained HTML document from a snapshot.

  1) root document: index.html, else the first */index.html
  2) after the first <head> (else <html>, else at the top): import map + Babel bootstrap
  3) entry script: first existing src/main, src/index, main, index (.tsx/.jsx/.ts/.js)
  4) entry source in a text/babel module script before </body> (else appended)

Pure string splicing, no parser: output depends on the snapshot only.
"""
from __future__ import annotations

import json
import re
from html import escape
from typing import Dict, Optional, Tuple

from .logsink import Logger, writeln
from .models import Snapshot, VirtualFile

ROOT_DOCUMENT = "index.html"

ENTRY_STEMS = ("src/main", "src/index", "main", "index")
SOURCE_EXTENSIONS = (".tsx", ".jsx", ".ts", ".js")
ENTRY_CANDIDATES = tuple(stem + ext for stem in ENTRY_STEMS for ext in SOURCE_EXTENSIONS)

TRANSPILE_PRESET = "tsx-module"
BABEL_STANDALONE_URL = "https://unpkg.com/@babel/standalone@7/babel.min.js"

IMPORT_MAP: Dict[str, str] = {
    "react": "https://esm.sh/react@18.3.1",
    "react/": "https://esm.sh/react@18.3.1/",
    "react/jsx-runtime": "https://esm.sh/react@18.3.1/jsx-runtime",
    "react-dom": "https://esm.sh/react-dom@18.3.1",
    "react-dom/": "https://esm.sh/react-dom@18.3.1/",
    "react-dom/client": "https://esm.sh/react-dom@18.3.1/client",
}

MISSING_INDEX_DOCUMENT = (
    "<!DOCTYPE html>\n"
    "<html><head><meta charset=\"utf-8\"><title>Preview unavailable</title></head>\n"
    "<body style=\"font-family: sans-serif; padding: 2rem; color: #a1a1aa; background: #09090b;\">\n"
    "<h2>index.html not found</h2>\n"
    "<p>The project archive has no index.html, so there is nothing to preview.</p>\n"
    "</body></html>\n"
)

_HEAD_OPEN_RE = re.compile(r"<head(?:\s[^>]*)?>", re.IGNORECASE)
_HTML_OPEN_RE = re.compile(r"<html(?:\s[^>]*)?>", re.IGNORECASE)
_BODY_CLOSE_RE = re.compile(r"</body\s*>", re.IGNORECASE)


def _import_map_tag() -> str:
    body = json.dumps({"imports": IMPORT_MAP}, indent=2, sort_keys=True)
    return f'<script type="importmap">\n{body}\n</script>'


def _transpiler_bootstrap() -> str:
    register = (
        "Babel.registerPreset(%s, {\n"
        "  presets: [\n"
        "    [Babel.availablePresets['typescript'], { allExtensions: true, isTSX: true }],\n"
        "    [Babel.availablePresets['react'], { runtime: 'automatic' }]\n"
        "  ],\n"
        "  parserOpts: { sourceType: 'module' }\n"
        "});"
    ) % json.dumps(TRANSPILE_PRESET)
    return f'<script src="{BABEL_STANDALONE_URL}"></script>\n<script>\n{register}\n</script>'


def dependency_shim() -> str:
    return "\n" + _import_map_tag() + "\n" + _transpiler_bootstrap() + "\n"


def find_root_document(snapshot: Snapshot) -> Optional[VirtualFile]:
    if ROOT_DOCUMENT in snapshot:
        return snapshot[ROOT_DOCUMENT]
    for path, vf in snapshot.items():
        if path.endswith("/" + ROOT_DOCUMENT):
            return vf
    return None


def find_entry_script(snapshot: Snapshot) -> Optional[VirtualFile]:
    for candidate in ENTRY_CANDIDATES:
        if candidate in snapshot:
            return snapshot[candidate]
    return None


def entry_script_tag(entry: VirtualFile) -> str:
    # literal source; the transpiler picks it up by type + preset
    return (
        f'<script type="text/babel" data-type="module" data-presets="{TRANSPILE_PRESET}" '
        f'data-entry="{escape(entry.path, quote=True)}">\n{entry.content}\n</script>'
    )


def inject_after_open_tag(html: str, fragment: str) -> Tuple[str, str]:
    """Insert right after the first <head>, else the first <html>, else at the top. Returns (doc, anchor)."""
    for anchor, rx in (("head", _HEAD_OPEN_RE), ("html", _HTML_OPEN_RE)):
        m = rx.search(html)
        if m:
            return html[: m.end()] + fragment + html[m.end():], anchor
    return fragment + html, "start"


def inject_before_body_close(html: str, fragment: str) -> Tuple[str, str]:
    m = _BODY_CLOSE_RE.search(html)
    if m:
        return html[: m.start()] + fragment + "\n" + html[m.start():], "body"
    return html + "\n" + fragment + "\n", "end"


def synthesize(snapshot: Snapshot, logger: Logger = writeln) -> str:
    root = find_root_document(snapshot)
    if root is None:
        logger("[preview] no index.html; serving diagnostic page")
        return MISSING_INDEX_DOCUMENT

    doc, anchor = inject_after_open_tag(root.content, dependency_shim())
    logger(f"[preview] root={root.path} shim@{anchor}")

    entry = find_entry_script(snapshot)
    if entry is None:
        logger("[preview] no entry script found")
        return doc

    doc, anchor = inject_before_body_close(doc, entry_script_tag(entry))
    logger(f"[preview] entry={entry.path} script@{anchor}")
    return doc
