# -*- coding: utf-8 -*-
"""
Storage Interface - Capabilities the catalog builder needs from storage.

The builder only lists folders, resolves download URLs, reads bounded
byte ranges and reads last-modified times. Backends implement
``StorageClient`` and translate their native failures into the
``appstore.catalog.errors`` taxonomy.

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
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Tuple


@dataclass(frozen=True)
class FolderHandle:
    """A folder (prefix) in the storage hierarchy.

    Attributes
    ----------
    path : str
        Full path without trailing slash, e.g. ``'Apps/EduConnect'``.
    name : str
        Last path component.
    """

    path: str
    name: str


@dataclass(frozen=True)
class FileHandle:
    """A file (object) in the storage hierarchy."""

    path: str
    name: str


@dataclass(frozen=True)
class Listing:
    """Immediate children of a folder, in backend order."""

    subfolders: Tuple[FolderHandle, ...] = ()
    files: Tuple[FileHandle, ...] = ()


def join_path(parent: str, name: str) -> str:
    """Join storage path components with ``/``."""
    parent = parent.strip("/")
    return f"{parent}/{name}" if parent else name


class StorageClient(ABC):
    """Authorized access to the app storage bucket."""

    @abstractmethod
    def list_children(self, path: str) -> Listing:
        """List immediate sub-folders and files of ``path``.

        Raises
        ------
        FetchError
            If the listing fails.
        """

    @abstractmethod
    def get_download_url(self, file: FileHandle) -> str:
        """Return a URL from which ``file`` can be downloaded.

        Raises
        ------
        FetchError
            If the file is unreachable or unauthorized.
        """

    @abstractmethod
    def get_bytes(self, file: FileHandle, max_bytes: int) -> bytes:
        """Read the contents of ``file``.

        Raises
        ------
        FetchError
            If the file is unreachable or larger than ``max_bytes``.
        """

    @abstractmethod
    def get_last_modified(self, file: FileHandle) -> datetime:
        """Return the last modification time of ``file``.

        Raises
        ------
        MetadataError
            If metadata is unavailable.
        """
