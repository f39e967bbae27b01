from __future__ import annotations

import asyncio
import zipfile
import zlib
from typing import TYPE_CHECKING, List

from tools.zip_utils import file_entries, open_archive, read_entry_text

from .errors import ArchiveDecodeError
from .logsink import Logger, writeln
from .models import Snapshot, VirtualFile

if TYPE_CHECKING:
    from tools.project_client import ProjectClient

# zipfile raises a grab bag of these on corrupt, truncated or encrypted members
_ENTRY_ERRORS = (zipfile.BadZipFile, zlib.error, EOFError, LookupError, NotImplementedError, RuntimeError)


async def _decode_entry(zf: zipfile.ZipFile, info: zipfile.ZipInfo, encoding: str) -> VirtualFile:
    await asyncio.sleep(0)
    try:
        content = read_entry_text(zf, info, encoding)
    except _ENTRY_ERRORS as exc:
        raise ArchiveDecodeError(f"Could not decode {info.filename}: {exc}") from exc
    return VirtualFile(path=info.filename, content=content, is_binary=False)


async def ingest(archive_bytes: bytes, *, encoding: str = "utf-8", logger: Logger = writeln) -> Snapshot:
    """
    Decompress archive bytes into a snapshot {path: VirtualFile}.

    Directory markers are skipped; every other entry is decoded to text and keyed by
    its archive-relative path as stored. Entries decode concurrently and the whole
    ingestion fails on the first bad entry, so a partial snapshot is never returned.
    """
    try:
        zf = open_archive(archive_bytes)
    except (zipfile.BadZipFile, OSError, ValueError) as exc:
        raise ArchiveDecodeError(f"Not a valid zip archive: {exc}") from exc

    with zf:
        entries = file_entries(zf)
        logger(f"[ingest] {len(entries)} file entries in archive ({len(archive_bytes)} bytes)")
        decoded: List[VirtualFile] = await asyncio.gather(
            *(_decode_entry(zf, info, encoding) for info in entries)
        )

    snapshot: Snapshot = {vf.path: vf for vf in decoded}
    logger(f"[ingest] ok: {len(snapshot)} file(s)")
    return snapshot


async def fetch_and_ingest(
    client: "ProjectClient",
    project_id: str,
    archive_name: str,
    *,
    logger: Logger = writeln,
) -> Snapshot:
    """Download one project archive and ingest it. ArchiveFetchError / ArchiveDecodeError propagate."""
    logger(f"[fetch] {project_id}/{archive_name}")
    data = await client.download_archive(project_id, archive_name)
    logger(f"[fetch] ok: {len(data)} bytes")
    return await ingest(data, logger=logger)
