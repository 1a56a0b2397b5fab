# -*- coding: utf-8 -*-
"""
Catalog Errors - Failure taxonomy for catalog aggregation.

``FetchError`` aborts a catalog build when raised by the root listing.
``DecodeError`` and ``MetadataError`` are local to one version or one
file and are absorbed by the builder.

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


class CatalogError(Exception):
    """Base class for catalog aggregation failures."""


class FetchError(CatalogError):
    """A storage listing, download or network call failed."""


class DecodeError(CatalogError):
    """A manifest document is malformed or misses required fields."""


class MetadataError(CatalogError):
    """Per-file metadata (last-modified time) is unavailable."""
