# -*- coding: utf-8 -*-
"""
Conftest for catalog tests.

Provides an in-memory storage backend with failure injection and a
factory for ``manifest.plist`` documents.

Created
-------
2026-02-06
"""

import plistlib
from datetime import datetime, timezone

import pytest

from appstore.catalog.errors import FetchError, MetadataError
from appstore.storage.base import (
    FileHandle,
    FolderHandle,
    Listing,
    StorageClient,
    join_path,
)


class FakeStorage(StorageClient):
    """Dictionary-backed ``StorageClient``; children keep insertion order."""

    def __init__(self) -> None:
        self.folders = {"": []}
        self.files = {"": []}
        self.content = {}
        self.mtimes = {}
        self.fail_listing = set()
        self.fail_url = set()
        self.fail_bytes = set()
        self.calls = []

    def add_folder(self, path):
        path = path.strip("/")
        if path in self.folders:
            return
        parent, _, name = path.rpartition("/")
        if parent:
            self.add_folder(parent)
        self.folders[parent].append(name)
        self.folders[path] = []
        self.files[path] = []

    def add_file(self, path, content=b"", mtime=None):
        parent, _, name = path.rpartition("/")
        if parent:
            self.add_folder(parent)
        self.files[parent].append(name)
        self.content[path] = content
        if mtime is not None:
            self.mtimes[path] = mtime

    def list_children(self, path):
        path = path.strip("/")
        self.calls.append(("list", path))
        if path in self.fail_listing or path not in self.folders:
            raise FetchError(f"cannot list {path}")
        return Listing(
            subfolders=tuple(
                FolderHandle(path=join_path(path, n), name=n)
                for n in self.folders[path]
            ),
            files=tuple(
                FileHandle(path=join_path(path, n), name=n)
                for n in self.files[path]
            ),
        )

    def get_download_url(self, file):
        self.calls.append(("url", file.path))
        if file.path in self.fail_url:
            raise FetchError(f"no url for {file.path}")
        return f"https://storage.example/{file.path}?token=t"

    def get_bytes(self, file, max_bytes):
        self.calls.append(("bytes", file.path))
        if file.path in self.fail_bytes:
            raise FetchError(f"cannot read {file.path}")
        data = self.content[file.path]
        if len(data) > max_bytes:
            raise FetchError(f"{file.path} too large")
        return data

    def get_last_modified(self, file):
        self.calls.append(("meta", file.path))
        if file.path not in self.mtimes:
            raise MetadataError(f"no metadata for {file.path}")
        return self.mtimes[file.path]


@pytest.fixture
def fake_storage():
    return FakeStorage()


def _manifest_bytes(
    bundle_version="1.0.0",
    bundle_identifier="com.educonnect.app",
    title="EduConnect",
    description=None,
    package_url="https://example.com/downloads/EduConnect.ipa",
    image_url=None,
    fmt=plistlib.FMT_XML,
):
    assets = [{'kind': 'software-package', 'url': package_url}]
    if image_url:
        assets.append({
            'kind': 'display-image', 'url': image_url, 'needs-shine': False,
        })
    metadata = {
        'bundle-identifier': bundle_identifier,
        'bundle-version': bundle_version,
        'kind': 'software',
        'title': title,
    }
    if description is not None:
        metadata['description'] = description
    return plistlib.dumps(
        {'items': [{'assets': assets, 'metadata': metadata}]}, fmt=fmt,
    )


@pytest.fixture
def make_manifest():
    """Factory returning ``manifest.plist`` bytes."""
    return _manifest_bytes


@pytest.fixture
def utc():
    """Shorthand for building aware datetimes."""
    def _utc(*args):
        return datetime(*args, tzinfo=timezone.utc)
    return _utc
