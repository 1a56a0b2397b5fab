# -*- coding: utf-8 -*-
"""
Catalog Module - App catalog aggregation and version resolution.

Builds the ordered ``Catalog`` of apps and versions from storage,
decodes install manifests, orders versions semantically and owns the
published catalog through ``CatalogService``.

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
