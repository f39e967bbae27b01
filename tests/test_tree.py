from __future__ import annotations

import pytest

from conftest import snapshot_of
from workspace_builder.errors import PathConflictError
from workspace_builder.tree import (
    KIND_DIRECTORY,
    KIND_FILE,
    DirectoryNode,
    FileLeaf,
    all_directory_paths,
    build_tree,
    flatten_paths,
    render_tree,
    select_row,
    toggle_folder,
)


def test_nested_path_creates_directories_and_leaf():
    tree = build_tree(snapshot_of({"a/b/c.txt": "x"}))
    a = tree.children["a"]
    assert isinstance(a, DirectoryNode) and a.path == "a"
    b = a.children["b"]
    assert isinstance(b, DirectoryNode) and b.path == "a/b"
    leaf = b.children["c.txt"]
    assert isinstance(leaf, FileLeaf)
    assert leaf.path == "a/b/c.txt"
    assert leaf.file.content == "x"


def test_shape_does_not_depend_on_insertion_order():
    files = {"src/a.ts": "1", "src/lib/b.ts": "2", "index.html": "3", "src/c.ts": "4"}
    forward = build_tree(snapshot_of(files))
    backward = build_tree(snapshot_of(dict(reversed(list(files.items())))))

    def shape(node):
        return {
            k: shape(v) if isinstance(v, DirectoryNode) else v.path
            for k, v in node.children.items()
        }

    assert shape(forward) == shape(backward)
    assert sorted(flatten_paths(forward)) == sorted(files)


def test_render_collapsed_by_default():
    tree = build_tree(snapshot_of({"src/main.tsx": "", "index.html": ""}))
    rows = render_tree(tree, {})
    assert [(r.path, r.depth, r.kind) for r in rows] == [
        ("src", 0, KIND_DIRECTORY),
        ("index.html", 0, KIND_FILE),
    ]
    assert rows[0].expanded is False


def test_render_expanded_follows_key_order():
    tree = build_tree(snapshot_of({"src/main.tsx": "", "src/lib/x.ts": "", "src/App.tsx": ""}))
    rows = render_tree(tree, {"src": True, "src/lib": True})
    assert [(r.path, r.depth) for r in rows] == [
        ("src", 0),
        ("src/main.tsx", 1),
        ("src/lib", 1),
        ("src/lib/x.ts", 2),
        ("src/App.tsx", 1),
    ]


def test_child_of_collapsed_parent_stays_hidden():
    tree = build_tree(snapshot_of({"a/b/c.txt": ""}))
    rows = render_tree(tree, {"a/b": True})
    assert [r.path for r in rows] == ["a"]


def test_toggle_is_independent_of_siblings():
    state = {"a": True}
    new = toggle_folder(state, "b")
    assert new == {"a": True, "b": True}
    assert state == {"a": True}
    assert toggle_folder(new, "a") == {"a": False, "b": True}


def test_select_row_file_vs_directory():
    tree = build_tree(snapshot_of({"src/main.tsx": "", "README.md": ""}))
    folder, readme = render_tree(tree, {})

    path, state = select_row(readme, {})
    assert path == "README.md"
    assert state == {}

    path, state = select_row(folder, {})
    assert path is None
    assert state == {"src": True}


@pytest.mark.parametrize(
    "files",
    [
        {"a": "file", "a/b.txt": "nested"},
        {"a/b.txt": "nested", "a": "file"},
    ],
)
def test_file_directory_conflict_is_rejected(files):
    with pytest.raises(PathConflictError) as ei:
        build_tree(snapshot_of(files))
    assert ei.value.path == "a"


def test_all_directory_paths():
    tree = build_tree(snapshot_of({"a/b/c.txt": "", "d/e.txt": "", "f.txt": ""}))
    assert all_directory_paths(tree) == ["a", "a/b", "d"]


def test_tree_does_not_touch_snapshot():
    snap = snapshot_of({"a/b.txt": "1"})
    before = dict(snap)
    build_tree(snap)
    assert snap == before
