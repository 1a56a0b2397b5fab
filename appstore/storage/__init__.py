# -*- coding: utf-8 -*-
"""
Storage Module - Backends serving the app bucket to the catalog builder.

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
from pathlib import Path

# Appstore internal
from appstore.core.config import AppStoreConfig
from appstore.storage.base import StorageClient


def open_storage(config: AppStoreConfig) -> StorageClient:
    """Create the storage client selected by ``config.backend``.

    For the ``'firebase'`` backend an anonymous sign-in is performed
    first when ``config.api_key`` is set.

    Parameters
    ----------
    config : AppStoreConfig

    Returns
    -------
    StorageClient

    Raises
    ------
    ValueError
        If the backend is unknown or ``local_dir`` is missing.
    FetchError
        If anonymous sign-in fails.
    """
    if config.backend == 'local':
        if not config.local_dir:
            raise ValueError("the 'local' backend requires local_dir")
        from appstore.storage.local import LocalStorage
        return LocalStorage(Path(config.local_dir).expanduser())

    if config.backend == 'firebase':
        from appstore.storage.firebase import (
            FirebaseStorage,
            sign_in_anonymously,
        )
        token = None
        if config.api_key:
            token = sign_in_anonymously(
                config.api_key, timeout=config.request_timeout
            )
        return FirebaseStorage(
            config.bucket, id_token=token, timeout=config.request_timeout
        )

    raise ValueError(
        f"backend must be 'firebase' or 'local', got {config.backend!r}"
    )
