# -*- coding: utf-8 -*-
"""
appstore - Internal app distribution catalog.

Aggregates a storage bucket laid out as ``<root>/<App>/<Version>/`` into
an ordered catalog of apps and versions, decodes each version's
over-the-air ``manifest.plist`` and derives ``itms-services`` install
links.

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

__version__ = "0.1.0"

from appstore.catalog.builder import build_catalog
from appstore.catalog.install import build_install_url
from appstore.catalog.models import App, AppVersion, Catalog
from appstore.catalog.service import CatalogService
from appstore.catalog.versioning import compare_versions

__all__: list = [
    "App",
    "AppVersion",
    "Catalog",
    "CatalogService",
    "build_catalog",
    "build_install_url",
    "compare_versions",
]
