# -*- coding: utf-8 -*-
"""
CatalogService - Owner of the current app catalog.

Holds the one published ``Catalog`` and refreshes it from storage,
either inline or on a background thread. Construct one instance at
start-up, hand it to whatever renders the catalog, and call
``shutdown()`` when done.

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
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

logger = logging.getLogger(__name__)

# Appstore internal
from appstore.catalog.builder import MAX_MANIFEST_BYTES, build_catalog
from appstore.catalog.errors import CatalogError
from appstore.catalog.models import Catalog
from appstore.storage.base import StorageClient


class CatalogService:
    """Builds and publishes the app catalog.

    A refresh replaces the published catalog only after a complete,
    successful build. When refreshes overlap, a result is discarded if
    a refresh started later has already published.

    Parameters
    ----------
    storage : StorageClient
        Authorized storage client.
    root_path : str
        Bucket folder holding the app folders. Default ``'Apps'``.
    max_workers : int
        Apps built concurrently during one refresh. Default 1.
    max_manifest_bytes : int
        Size cap for manifest downloads.
    """

    def __init__(
        self,
        storage: StorageClient,
        root_path: str = "Apps",
        max_workers: int = 1,
        max_manifest_bytes: int = MAX_MANIFEST_BYTES,
    ) -> None:
        self._storage = storage
        self._root_path = root_path
        self._max_workers = max_workers
        self._max_manifest_bytes = max_manifest_bytes
        self._catalog = Catalog()
        self._lock = threading.Lock()
        self._started = 0
        self._published = 0
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def catalog(self) -> Catalog:
        """The most recently published catalog (empty before the first)."""
        return self._catalog

    def refresh(self) -> Catalog:
        """Rebuild the catalog and publish it.

        Returns
        -------
        Catalog
            The currently published catalog after this refresh. This is
            a newer catalog than the one built here if a later refresh
            finished first.

        Raises
        ------
        FetchError
            If the root listing fails. The published catalog is kept.
        """
        with self._lock:
            self._started += 1
            generation = self._started

        catalog = build_catalog(
            self._storage,
            self._root_path,
            max_workers=self._max_workers,
            max_manifest_bytes=self._max_manifest_bytes,
        )

        with self._lock:
            if generation > self._published:
                self._catalog = catalog
                self._published = generation
                logger.info("Published catalog with %d apps", len(catalog))
            else:
                logger.info(
                    "Discarding stale catalog from refresh #%d", generation
                )
            return self._catalog

    def try_refresh(self) -> Optional[Catalog]:
        """Refresh, logging instead of raising on failure.

        Returns
        -------
        Optional[Catalog]
            The published catalog, or None if the build failed.
        """
        try:
            return self.refresh()
        except CatalogError as e:
            logger.error("Catalog refresh failed: %s", e)
            return None

    def submit_refresh(self) -> Future:
        """Run ``refresh`` on the service's background thread.

        Returns
        -------
        Future
            Future resolving to the published ``Catalog``.
        """
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="catalog-refresh"
            )
        return self._executor.submit(self.refresh)

    def shutdown(self, wait: bool = True) -> None:
        """Stop the background refresh thread, if one was started.

        Parameters
        ----------
        wait : bool
            If True, wait for a running refresh to complete.
        """
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def __enter__(self) -> 'CatalogService':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
