# -*- coding: utf-8 -*-
"""
Config Path Resolver - Locate the appstore configuration file.

Resolves the configuration file path using a priority chain:
1. APPSTORE_CONFIG environment variable (highest priority)
2. ~/.appstore/config.json (default fallback)

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
import os
from pathlib import Path


_ENV_VAR = "APPSTORE_CONFIG"
_CONFIG_DIR = ".appstore"
_CONFIG_FILE = "config.json"


def resolve_config_path() -> Path:
    """Resolve the configuration file path.

    Priority:
    1. ``APPSTORE_CONFIG`` environment variable
    2. ``~/.appstore/config.json`` (default)

    Returns
    -------
    Path
        Resolved path to the configuration file. It may not exist.
    """
    env_path = os.environ.get(_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()

    return Path.home() / _CONFIG_DIR / _CONFIG_FILE

