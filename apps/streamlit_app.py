# apps/streamlit_app.py
from __future__ import annotations

# ---------- import bootstrap (make project root importable) ----------
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]  # repo root
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
# --------------------------------------------------------------------

import asyncio

import streamlit as st
import streamlit.components.v1 as components
from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv(usecwd=True) or (ROOT / ".env"), override=False)

from tools.languages import guess_language
from tools.project_client import ProjectClient
from tools.ui_utils import button_key, tree_indent
from workspace_builder.config import Settings
from workspace_builder.errors import (
    PartialWriteFailure,
    PathConflictError,
    ProjectServerUnavailableError,
    UnsupportedEnvironmentError,
    UserCancelledError,
)
from workspace_builder.logsink import writeln
from workspace_builder.materialize import directory_picker, materialize
from workspace_builder.models import STATUS_ERROR, STATUS_LOADING, STATUS_READY
from workspace_builder.preview import find_entry_script, find_root_document, synthesize
from workspace_builder.sanitize import safe_folder_name
from workspace_builder.session import WorkspaceSession
from workspace_builder.tree import KIND_FILE, build_tree, render_tree, select_row

st.set_page_config(page_title="Project Hub", page_icon="⚡", layout="wide")

settings = Settings.from_env()
client = ProjectClient.from_settings(settings)

# Session log buffer
if "log_messages" not in st.session_state:
    st.session_state.log_messages = []


def ui_log(m: str) -> None:
    st.session_state.log_messages.append(m)
    writeln(m)


if "workspace" not in st.session_state:
    st.session_state.workspace = WorkspaceSession(logger=ui_log)
st.session_state.setdefault("projects", None)
st.session_state.setdefault("projects_error", None)
st.session_state.setdefault("preview_reloads", 0)

ws: WorkspaceSession = st.session_state.workspace


def _load_projects() -> None:
    st.session_state.projects_error = None
    try:
        st.session_state.projects = asyncio.run(client.list_projects())
    except ProjectServerUnavailableError as e:
        st.session_state.projects = []
        st.session_state.projects_error = str(e)


if st.session_state.projects is None:
    with st.spinner("Fetching projects…"):
        _load_projects()


# ---- Sidebar: remote projects ----
with st.sidebar:
    head, refresh = st.columns([0.75, 0.25])
    head.subheader("⚡ Remote Projects")
    if refresh.button("🔄", help="Refresh list", key=button_key("refresh_projects")):
        with st.spinner("Fetching projects…"):
            _load_projects()

    st.caption(f"Server: `{settings.api_base}`")

    if st.session_state.projects_error:
        st.error(st.session_state.projects_error)
    elif not st.session_state.projects:
        st.info("No projects found")

    for proj in st.session_state.projects or []:
        is_active = ws.state.id == proj.id
        label = f"{'▶ ' if is_active else ''}ID: {proj.id}\n\n{proj.archive_name}"
        if st.button(label, key=button_key("project", proj.id), use_container_width=True,
                     type="primary" if is_active else "secondary"):
            with st.spinner("Unpacking archive…"):
                asyncio.run(ws.load_project(client, proj))
            st.session_state.preview_reloads = 0
            st.rerun()


# ---- Main area ----
status = ws.state.status

if status == STATUS_LOADING:
    st.info("Unpacking archive… indexing project structure.")

elif status == STATUS_ERROR:
    st.error("Load failure: the remote ZIP archive could not be fetched or parsed.")
    if ws.state.error:
        st.caption(ws.state.error)
    if st.button("Restart fetch", key=button_key("restart_fetch")):
        st.session_state.projects = None
        st.rerun()

elif status == STATUS_READY:
    files = ws.state.files
    st.subheader(f"📦 {ws.state.id}")
    st.caption(f"{len(files)} file(s)")

    col_tree, col_main = st.columns([0.3, 0.7])

    with col_tree:
        st.markdown("**Project Structure**")
        try:
            tree = build_tree(files)
        except PathConflictError as e:
            tree = None
            st.error(str(e))

        if tree is not None:
            for row in render_tree(tree, ws.expanded):
                if row.kind == KIND_FILE:
                    label = f"{tree_indent(row.depth)}📄 {row.name}"
                else:
                    label = f"{tree_indent(row.depth)}{'▾' if row.expanded else '▸'} 📁 {row.name}"
                if st.button(label, key=button_key(row.kind, row.path), use_container_width=True):
                    selected, ws.expanded = select_row(row, ws.expanded)
                    if selected is not None:
                        ws.select_file(selected)
                    st.rerun()

    with col_main:
        tab_code, tab_preview, tab_export = st.tabs(["🧾 Code", "🖥️ Preview", "💾 Export"])

        with tab_code:
            vf = ws.selected_file
            if vf is None:
                st.info("Select a file to inspect")
            else:
                st.caption(vf.path)
                st.code(vf.content, language=guess_language(vf.path))

        with tab_preview:
            root_doc = find_root_document(files)
            entry = find_entry_script(files)
            st.caption(
                f"Root: `{root_doc.path if root_doc else 'missing'}` · "
                f"Entry: `{entry.path if entry else 'none'}`"
            )
            if st.button("🔁 Reload preview", key=button_key("reload_preview")):
                st.session_state.preview_reloads += 1
            doc = synthesize(files, logger=writeln)
            # the marker changes the iframe source so Streamlit remounts it on reload
            components.html(
                doc + f"\n<!-- reload:{st.session_state.preview_reloads} -->",
                height=640,
                scrolling=True,
            )

        with tab_export:
            dest = st.text_input(
                "Destination folder",
                value=str(settings.export_dir / safe_folder_name(ws.state.id)),
                key=button_key("export_dest", ws.state.id),
            )
            st.caption("Existing files with the same name are overwritten. Leave blank to cancel.")

            if st.button("✨ Write files to folder", type="primary", key=button_key("export_run")):
                ws.progress.clear()
                bar = st.progress(0.0)
                log_placeholder = st.empty()
                total = max(len(files), 1)

                def _on_progress(path: str) -> None:
                    ws.progress.add(f"Written: {path}")
                    bar.progress(len(ws.progress.entries) / total)
                    log_placeholder.code("\n".join(ws.progress.lines()[-20:]), language="text")

                try:
                    name = materialize(files, _on_progress, directory_picker(dest), logger=ui_log)
                    st.success(f"Synced {len(files)} file(s) into `{name}`")
                except UserCancelledError as e:
                    st.warning(str(e))
                except UnsupportedEnvironmentError as e:
                    st.error(str(e))
                except PartialWriteFailure as e:
                    st.error(f"{e}. {len(e.written)} file(s) were written before the failure and were left in place.")

else:
    st.title("📂 Project Hub")
    st.markdown(
        "Connect to the remote project server, pick a project on the left and inspect its "
        "files, preview the app in a sandbox, or write it to a local folder."
    )

with st.expander("🪵 Run Logs", expanded=False):
    st.text_area(
        "Logs",
        "\n".join(st.session_state.log_messages[-300:]),
        height=240,
        key=button_key("log_display", len(st.session_state.log_messages)),
        label_visibility="collapsed",
    )
