from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from tools.project_client import ProjectClient

from .config import Settings
from .errors import WorkspaceError
from .ingest import fetch_and_ingest
from .materialize import directory_picker, materialize
from .models import ProjectData, Snapshot
from .preview import synthesize
from .tree import KIND_DIRECTORY, all_directory_paths, build_tree, render_tree


def _find_project(projects: List[ProjectData], project_id: str, archive: Optional[str]) -> ProjectData:
    for p in projects:
        if p.id == project_id:
            return ProjectData(id=p.id, files=[archive]) if archive else p
    # not listed (or listing empty): still try the download directly
    return ProjectData(id=project_id, files=[archive] if archive else [])


async def _load(client: ProjectClient, project_id: str, archive: Optional[str]) -> Snapshot:
    project = _find_project(await client.list_projects(), project_id, archive)
    return await fetch_and_ingest(client, project.id, project.archive_name)


def _cmd_list(client: ProjectClient, args: argparse.Namespace) -> int:
    projects = asyncio.run(client.list_projects())
    if not projects:
        print("No projects found.")
        return 0
    for p in projects:
        print(f"{p.id}\t{p.archive_name}")
    return 0


def _cmd_tree(client: ProjectClient, args: argparse.Namespace) -> int:
    snapshot = asyncio.run(_load(client, args.project, args.archive))
    root = build_tree(snapshot)
    expanded = {p: True for p in all_directory_paths(root)} if args.expand_all else {}
    for row in render_tree(root, expanded):
        marker = ("▾ " if row.expanded else "▸ ") if row.kind == KIND_DIRECTORY else "  "
        suffix = "/" if row.kind == KIND_DIRECTORY else ""
        print(f"{'  ' * row.depth}{marker}{row.name}{suffix}")
    return 0


def _cmd_preview(client: ProjectClient, args: argparse.Namespace) -> int:
    snapshot = asyncio.run(_load(client, args.project, args.archive))
    doc = synthesize(snapshot)
    if args.out:
        Path(args.out).write_text(doc, encoding="utf-8")
        print(f"Preview written to {args.out}")
    else:
        sys.stdout.write(doc)
    return 0


def _cmd_export(client: ProjectClient, args: argparse.Namespace) -> int:
    snapshot = asyncio.run(_load(client, args.project, args.archive))
    name = materialize(
        snapshot,
        on_progress=lambda p: print(f"  + {p}"),
        picker=directory_picker(args.dest),
    )
    print(f"\nDONE ✅ {len(snapshot)} file(s) written to {name}")
    return 0


def main(argv=None) -> int:
    load_dotenv(find_dotenv(usecwd=True), override=False)
    settings = Settings.from_env()

    ap = argparse.ArgumentParser("workspace-builder")
    ap.add_argument("--api-base", default=settings.api_base, help="Project service base URL")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List remote projects")

    for name, help_text in (
        ("tree", "Print the file tree of a project archive"),
        ("preview", "Synthesize the sandboxed preview document"),
        ("export", "Write the project files into a local folder"),
    ):
        sp = sub.add_parser(name, help=help_text)
        sp.add_argument("project", help="Project id")
        sp.add_argument("--archive", default=None, help="Archive filename (defaults to the first listed)")
        if name == "tree":
            sp.add_argument("--expand-all", action="store_true", help="Expand every folder")
        elif name == "preview":
            sp.add_argument("--out", default=None, help="Write the document here instead of stdout")
        else:
            sp.add_argument("--dest", default=str(settings.export_dir), help="Destination folder")

    args = ap.parse_args(argv)
    settings.api_base = args.api_base.rstrip("/")
    client = ProjectClient.from_settings(settings)

    handlers = {"list": _cmd_list, "tree": _cmd_tree, "preview": _cmd_preview, "export": _cmd_export}
    try:
        return handlers[args.command](client, args)
    except WorkspaceError as e:
        print(f"  ! {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
