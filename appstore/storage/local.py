# -*- coding: utf-8 -*-
"""
Local Storage - Serve the app bucket layout from a local directory.

Mirrors ``<root>/<AppName>/<Version>/`` on disk, which is handy for
staging a bucket before upload and for headless inspection.

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-02-06

Modified
--------
2026-02-06
"""

# Standard library
import logging
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

# Appstore internal
from appstore.catalog.errors import FetchError, MetadataError
from appstore.storage.base import (
    FileHandle,
    FolderHandle,
    Listing,
    StorageClient,
    join_path,
)


class LocalStorage(StorageClient):
    """``StorageClient`` over a directory tree.

    Parameters
    ----------
    base_dir : Path
        Directory playing the role of the bucket root.
    """

    def __init__(self, base_dir: Path) -> None:
        self._base_dir = Path(base_dir)

    def _resolve(self, path: str) -> Path:
        return self._base_dir.joinpath(*[p for p in path.split("/") if p])

    def list_children(self, path: str) -> Listing:
        directory = self._resolve(path)
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise FetchError(f"cannot list '{path}': {e}") from e

        folders = []
        files = []
        for entry in entries:
            child = join_path(path, entry.name)
            if entry.is_dir():
                folders.append(FolderHandle(path=child, name=entry.name))
            elif entry.is_file():
                files.append(FileHandle(path=child, name=entry.name))
        return Listing(subfolders=tuple(folders), files=tuple(files))

    def get_download_url(self, file: FileHandle) -> str:
        target = self._resolve(file.path)
        if not target.is_file():
            raise FetchError(f"no such file: '{file.path}'")
        return target.resolve().as_uri()

    def get_bytes(self, file: FileHandle, max_bytes: int) -> bytes:
        target = self._resolve(file.path)
        try:
            size = target.stat().st_size
            if size > max_bytes:
                raise FetchError(
                    f"'{file.path}' is {size} bytes, limit is {max_bytes}"
                )
            return target.read_bytes()
        except OSError as e:
            raise FetchError(f"cannot read '{file.path}': {e}") from e

    def get_last_modified(self, file: FileHandle) -> datetime:
        try:
            mtime = self._resolve(file.path).stat().st_mtime
        except OSError as e:
            raise MetadataError(f"no metadata for '{file.path}': {e}") from e
        return datetime.fromtimestamp(mtime, tz=timezone.utc)
