# -*- coding: utf-8 -*-
"""
Core Module - Configuration for the app catalog.

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
