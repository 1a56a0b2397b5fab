# -*- coding: utf-8 -*-
"""
Catalog Builder - Aggregate the app bucket into an ordered ``Catalog``.

Walks ``<root>/<AppName>/<Version>/``, decodes each version's
``manifest.plist``, picks an icon file, computes the latest file
modification time and sorts the result (apps A to Z, versions newest
first).

Only the root listing is fatal. Every call below it goes through
``_attempt``, which turns a ``CatalogError`` into ``None`` so one bad
file or folder degrades a single field instead of the whole build.

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
import locale
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Callable, List, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

# Appstore internal
from appstore.catalog.errors import CatalogError
from appstore.catalog.manifest import decode_manifest
from appstore.catalog.models import App, AppVersion, Catalog, Manifest
from appstore.catalog.versioning import sort_versions
from appstore.storage.base import FileHandle, FolderHandle, StorageClient


MANIFEST_FILENAME = "manifest.plist"
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp")
MAX_MANIFEST_BYTES = 2 * 1024 * 1024

T = TypeVar('T')


def _attempt(what: str, call: Callable[..., T], *args) -> Optional[T]:
    """Run one fallible storage or decode call; None on ``CatalogError``."""
    try:
        return call(*args)
    except CatalogError as e:
        logger.warning("%s failed: %s", what, e)
        return None


def find_manifest(files: Sequence[FileHandle]) -> Optional[FileHandle]:
    """Return the file named ``manifest.plist`` (any case), if present."""
    for f in files:
        if f.name.lower() == MANIFEST_FILENAME:
            return f
    return None


def find_image(files: Sequence[FileHandle]) -> Optional[FileHandle]:
    """Return the first file with an image extension, in listing order."""
    for f in files:
        if f.name.lower().endswith(IMAGE_EXTENSIONS):
            return f
    return None


def _latest_timestamp(
    files: Sequence[FileHandle],
    storage: StorageClient,
) -> Optional[datetime]:
    latest: Optional[datetime] = None
    for f in files:
        try:
            updated = storage.get_last_modified(f)
        except CatalogError as e:
            logger.debug("Skipping timestamp of %s: %s", f.path, e)
            continue
        if latest is None or updated > latest:
            latest = updated
    return latest


def _load_manifest(
    manifest_file: FileHandle,
    storage: StorageClient,
    max_bytes: int,
) -> Optional[Manifest]:
    raw = _attempt(
        f"Download of {manifest_file.path}",
        storage.get_bytes, manifest_file, max_bytes,
    )
    if raw is None:
        return None
    return _attempt(f"Decoding {manifest_file.path}", decode_manifest, raw)


def build_version(
    app_name: str,
    version_folder: FolderHandle,
    storage: StorageClient,
    max_manifest_bytes: int = MAX_MANIFEST_BYTES,
) -> AppVersion:
    """Build one ``AppVersion`` from the files of a version folder.

    Parameters
    ----------
    app_name : str
        Name of the owning app.
    version_folder : FolderHandle
        The version folder; its name becomes ``AppVersion.version``.
    storage : StorageClient
        Authorized storage client.
    max_manifest_bytes : int
        Size cap for the manifest download. Default 2 MiB.

    Returns
    -------
    AppVersion
        Always returned; fields whose source failed are None.
    """
    logger.debug("Building version %s", version_folder.path)

    listing = _attempt(
        f"Listing {version_folder.path}",
        storage.list_children, version_folder.path,
    )
    files = listing.files if listing is not None else ()
    if not files:
        logger.warning("No files inside version folder %s", version_folder.path)

    manifest_url: Optional[str] = None
    manifest: Optional[Manifest] = None
    manifest_file = find_manifest(files)
    if manifest_file is None:
        logger.warning("No %s in %s", MANIFEST_FILENAME, version_folder.path)
    else:
        manifest_url = _attempt(
            f"Download URL of {manifest_file.path}",
            storage.get_download_url, manifest_file,
        )
        manifest = _load_manifest(manifest_file, storage, max_manifest_bytes)

    description: Optional[str] = None
    if manifest is not None and manifest.first_item is not None:
        metadata = manifest.first_item.metadata
        description = metadata.description
        logger.debug(
            "Manifest of %s: title=%s bundle=%s version=%s",
            version_folder.path, metadata.title,
            metadata.bundle_identifier, metadata.bundle_version,
        )

    image_file = find_image(files)
    timestamp = _latest_timestamp(files, storage)

    return AppVersion(
        app_name=app_name,
        version=version_folder.name,
        manifest_url=manifest_url,
        image_name=image_file.name if image_file else None,
        description=description,
        timestamp=timestamp,
        manifest=manifest,
    )


def build_app(
    app_folder: FolderHandle,
    storage: StorageClient,
    max_manifest_bytes: int = MAX_MANIFEST_BYTES,
) -> App:
    """Build an ``App`` with its versions sorted newest first.

    A failed listing of the app folder yields an app with no versions.
    """
    logger.debug("Building app %s", app_folder.path)
    listing = _attempt(
        f"Listing {app_folder.path}",
        storage.list_children, app_folder.path,
    )
    folders = listing.subfolders if listing is not None else ()
    if not folders:
        logger.warning("No version folders found for %s", app_folder.path)

    versions = [
        build_version(app_folder.name, folder, storage, max_manifest_bytes)
        for folder in folders
    ]
    logger.debug("Built %s with %d versions", app_folder.name, len(versions))
    return App(name=app_folder.name, versions=tuple(sort_versions(versions)))


def _app_sort_key(app: App) -> str:
    return locale.strxfrm(app.name.casefold())


def build_catalog(
    storage: StorageClient,
    root_path: str,
    max_workers: int = 1,
    max_manifest_bytes: int = MAX_MANIFEST_BYTES,
) -> Catalog:
    """Build the full catalog below ``root_path``.

    Parameters
    ----------
    storage : StorageClient
        Authorized storage client.
    root_path : str
        Bucket folder holding one sub-folder per app, e.g. ``'Apps'``.
    max_workers : int
        Apps built concurrently. 1 (default) builds strictly in
        sequence. Versions of one app are always built in sequence.
    max_manifest_bytes : int
        Size cap for each manifest download.

    Returns
    -------
    Catalog
        Apps sorted by name (case-insensitive), versions newest first.
        Name collation follows the process ``LC_COLLATE`` setting; under
        the default "C" locale it is plain codepoint order.

    Raises
    ------
    FetchError
        If the root folder cannot be listed.
    """
    logger.info("Listing root path '%s'", root_path)
    root = storage.list_children(root_path)

    for stray in root.files:
        logger.warning("Ignoring unexpected file at app level: %s", stray.path)
    if not root.subfolders:
        logger.warning("No app folders found under '%s'", root_path)

    apps: List[App]
    if max_workers > 1 and len(root.subfolders) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            apps = list(pool.map(
                lambda folder: build_app(folder, storage, max_manifest_bytes),
                root.subfolders,
            ))
    else:
        apps = [
            build_app(folder, storage, max_manifest_bytes)
            for folder in root.subfolders
        ]

    apps.sort(key=_app_sort_key)
    logger.info("Catalog built: %d apps", len(apps))
    for app in apps:
        logger.debug("  %s: %d versions", app.name, len(app.versions))
    return Catalog(apps=tuple(apps))
