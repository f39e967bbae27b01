# tools/zip_utils.py
from __future__ import annotations

import io
import zipfile
from typing import List


def open_archive(data: bytes) -> zipfile.ZipFile:
    """Open in-memory archive bytes. Raises zipfile.BadZipFile for anything that isn't a zip."""
    return zipfile.ZipFile(io.BytesIO(data))


def file_entries(zf: zipfile.ZipFile) -> List[zipfile.ZipInfo]:
    """Archive entries that are not directory markers, in archive order."""
    out: List[zipfile.ZipInfo] = []
    for info in zf.infolist():
        if info.is_dir():
            continue
        if not info.filename:
            continue
        out.append(info)
    return out


def read_entry_text(zf: zipfile.ZipFile, info: zipfile.ZipInfo, encoding: str = "utf-8") -> str:
    # CRC and decompression errors surface here, on read
    with zf.open(info, "r") as f:
        data = f.read()
    return data.decode(encoding, errors="replace")
