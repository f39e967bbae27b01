from __future__ import annotations

import pytest

from tools.languages import guess_language
from tools.ui_utils import button_key, tree_indent
from workspace_builder.sanitize import ensure_under, safe_folder_name


@pytest.mark.parametrize(
    "path,lang",
    [
        ("src/main.tsx", "tsx"),
        ("index.html", "html"),
        ("deploy/Dockerfile", "docker"),
        (".env.local", "bash"),
        ("vite.config.mjs", "javascript"),
        ("LICENSE", "text"),
    ],
)
def test_guess_language(path, lang):
    assert guess_language(path) == lang


def test_button_key_is_stable_and_distinct():
    assert button_key("file", "src/a.ts") == button_key("file", "src/a.ts")
    assert button_key("file", "src/a.ts") != button_key("file", "src/b.ts")
    assert button_key("Run Export").startswith("btn::run_export::")


def test_tree_indent():
    assert tree_indent(0) == ""
    assert tree_indent(2) == "\u00a0" * 8


@pytest.mark.parametrize(
    "name,expected",
    [("abc-123", "abc-123"), ("my project/v2", "my_project_v2"), ("", "project"), ("../..", "project")],
)
def test_safe_folder_name(name, expected):
    assert safe_folder_name(name) == expected


def test_ensure_under(tmp_path):
    assert ensure_under(tmp_path, "a/b.txt") == (tmp_path / "a" / "b.txt").resolve()
    with pytest.raises(ValueError):
        ensure_under(tmp_path, "../outside.txt")
