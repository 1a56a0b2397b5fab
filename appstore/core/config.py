# -*- coding: utf-8 -*-
"""
Configuration Module - Configurable defaults for the app catalog.

Provides an AppStoreConfig dataclass naming the storage backend, the
bucket and root folder to aggregate, and limits for the build. Loads
from the path chosen by ``appstore.core.resolver`` if it exists,
otherwise uses the defaults.

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
import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Appstore internal
from appstore.core.resolver import resolve_config_path


BACKENDS = ('firebase', 'local')


@dataclass
class AppStoreConfig:
    """Catalog configuration with defaults.

    Attributes
    ----------
    backend : str
        Storage backend, ``'firebase'`` or ``'local'``.
    bucket : str
        Firebase Storage bucket name.
    root_path : str
        Folder holding one sub-folder per app.
    api_key : Optional[str]
        Firebase Web API key used for anonymous sign-in.
    local_dir : Optional[str]
        Directory served by the ``'local'`` backend.
    request_timeout : float
        HTTP timeout for storage requests in seconds.
    max_manifest_bytes : int
        Size cap for ``manifest.plist`` downloads.
    max_workers : int
        Apps built concurrently during a refresh.
    """

    backend: str = "firebase"
    bucket: str = "internalappstore-4cd4d.firebasestorage.app"
    root_path: str = "Apps"
    api_key: Optional[str] = None
    local_dir: Optional[str] = None
    request_timeout: float = 10.0
    max_manifest_bytes: int = 2 * 1024 * 1024
    max_workers: int = 1

    def save(self, path: Optional[Path] = None) -> None:
        """Save config to JSON file."""
        path = path or resolve_config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(asdict(self), f, indent=2)


def load_config(path: Optional[Path] = None) -> AppStoreConfig:
    """Load configuration from file, or return defaults.

    Parameters
    ----------
    path : Optional[Path]
        Config file path. Defaults to ``resolve_config_path()``.

    Returns
    -------
    AppStoreConfig
        Loaded or default configuration.
    """
    path = path or resolve_config_path()
    if not path.exists():
        logger.debug("No config at %s, using defaults", path)
        return AppStoreConfig()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        unknown = sorted(set(data) - set(AppStoreConfig.__dataclass_fields__))
        if unknown:
            logger.warning("Ignoring unknown config keys in %s: %s",
                           path, ", ".join(unknown))
        config = AppStoreConfig(**{
            k: v for k, v in data.items() if k not in unknown
        })
        if config.max_workers < 1:
            logger.warning("max_workers must be at least 1, got %r",
                           config.max_workers)
            config.max_workers = 1
    except (OSError, ValueError, TypeError, AttributeError) as e:
        logger.warning("Failed to load config from %s: %s", path, e)
        return AppStoreConfig()

    if config.backend not in BACKENDS:
        logger.warning("Unknown backend %r in %s, using %r",
                       config.backend, path, AppStoreConfig.backend)
        config.backend = AppStoreConfig.backend
    return config
