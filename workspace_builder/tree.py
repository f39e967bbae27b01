from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple, Union

from .errors import PathConflictError
from .models import Snapshot, VirtualFile

KIND_DIRECTORY = "directory"
KIND_FILE = "file"


@dataclass
class FileLeaf:
    name: str
    path: str
    file: VirtualFile


@dataclass
class DirectoryNode:
    name: str
    path: str
    children: Dict[str, "TreeNode"] = field(default_factory=dict)


TreeNode = Union[DirectoryNode, FileLeaf]


@dataclass(frozen=True)
class TreeRow:
    path: str
    name: str
    depth: int
    kind: str
    expanded: bool = False


def build_tree(snapshot: Snapshot) -> DirectoryNode:
    """
    Build the folder hierarchy from flat snapshot paths.

    "a/b/c.txt" yields directory a, directory a/b and leaf a/b/c.txt. A segment that
    would be both a file and a directory raises PathConflictError.
    """
    root = DirectoryNode(name="", path="")
    for path, vf in snapshot.items():
        parts = path.split("/")
        current = root
        for i, part in enumerate(parts[:-1]):
            sub_path = "/".join(parts[: i + 1])
            child = current.children.get(part)
            if child is None:
                child = DirectoryNode(name=part, path=sub_path)
                current.children[part] = child
            elif isinstance(child, FileLeaf):
                raise PathConflictError(sub_path)
            current = child

        name = parts[-1]
        existing = current.children.get(name)
        if isinstance(existing, DirectoryNode):
            raise PathConflictError(path)
        current.children[name] = FileLeaf(name=name, path=path, file=vf)
    return root


def render_tree(node: DirectoryNode, expanded: Mapping[str, bool], depth: int = 0) -> List[TreeRow]:
    """Visible rows, depth-first; a folder's children show only while its path is expanded."""
    rows: List[TreeRow] = []
    for child in node.children.values():
        if isinstance(child, FileLeaf):
            rows.append(TreeRow(path=child.path, name=child.name, depth=depth, kind=KIND_FILE))
            continue
        is_open = bool(expanded.get(child.path, False))
        rows.append(TreeRow(path=child.path, name=child.name, depth=depth, kind=KIND_DIRECTORY, expanded=is_open))
        if is_open:
            rows.extend(render_tree(child, expanded, depth + 1))
    return rows


def toggle_folder(expanded: Mapping[str, bool], path: str) -> Dict[str, bool]:
    out = dict(expanded)
    out[path] = not out.get(path, False)
    return out


def select_row(row: TreeRow, expanded: Mapping[str, bool]) -> Tuple[Optional[str], Dict[str, bool]]:
    """Clicking a file signals its path; clicking a folder only flips that folder."""
    if row.kind == KIND_FILE:
        return row.path, dict(expanded)
    return None, toggle_folder(expanded, row.path)


def all_directory_paths(node: DirectoryNode) -> List[str]:
    out: List[str] = []
    for child in node.children.values():
        if isinstance(child, DirectoryNode):
            out.append(child.path)
            out.extend(all_directory_paths(child))
    return out


def flatten_paths(node: DirectoryNode) -> List[str]:
    out: List[str] = []
    for child in node.children.values():
        if isinstance(child, FileLeaf):
            out.append(child.path)
        else:
            out.extend(flatten_paths(child))
    return out
