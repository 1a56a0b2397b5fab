# -*- coding: utf-8 -*-
"""
Manifest Decoder - Parse ``manifest.plist`` install manifests.

Decodes the property list served to ``itms-services`` into a
``Manifest`` record. Hyphenated wire keys are mapped to attribute
names; unknown keys are ignored.

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
import plistlib
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Appstore internal
from appstore.catalog.errors import DecodeError
from appstore.catalog.models import (
    Manifest,
    ManifestAsset,
    ManifestItem,
    ManifestMetadata,
)


def _require_type(value: Any, expected: type, where: str) -> Any:
    if not isinstance(value, expected):
        raise DecodeError(
            f"{where}: expected {expected.__name__}, "
            f"got {type(value).__name__}"
        )
    return value


def _optional(data: Dict[str, Any], key: str, expected: type,
              where: str) -> Optional[Any]:
    value = data.get(key)
    if value is None:
        return None
    return _require_type(value, expected, f"{where}.{key}")


def _required(data: Dict[str, Any], key: str, expected: type,
              where: str) -> Any:
    if key not in data:
        raise DecodeError(f"{where}: missing required key '{key}'")
    return _require_type(data[key], expected, f"{where}.{key}")


def _decode_asset(data: Any, where: str) -> ManifestAsset:
    _require_type(data, dict, where)
    return ManifestAsset(
        kind=_required(data, 'kind', str, where),
        url=_optional(data, 'url', str, where),
        needs_shine=_optional(data, 'needs-shine', bool, where),
    )


def _decode_metadata(data: Any, where: str) -> ManifestMetadata:
    _require_type(data, dict, where)
    return ManifestMetadata(
        bundle_identifier=_required(data, 'bundle-identifier', str, where),
        bundle_version=_required(data, 'bundle-version', str, where),
        kind=_optional(data, 'kind', str, where),
        platform_identifier=_optional(data, 'platform-identifier', str, where),
        title=_optional(data, 'title', str, where),
        description=_optional(data, 'description', str, where),
    )


def _decode_item(data: Any, where: str) -> ManifestItem:
    _require_type(data, dict, where)
    assets = _required(data, 'assets', list, where)
    return ManifestItem(
        assets=tuple(
            _decode_asset(a, f"{where}.assets[{i}]")
            for i, a in enumerate(assets)
        ),
        metadata=_decode_metadata(
            _required(data, 'metadata', dict, where), f"{where}.metadata"
        ),
    )


def decode_manifest(raw: bytes) -> Manifest:
    """Decode raw ``manifest.plist`` bytes.

    Both XML and binary property lists are accepted.

    Parameters
    ----------
    raw : bytes
        File contents.

    Returns
    -------
    Manifest
        Decoded manifest.

    Raises
    ------
    DecodeError
        If the bytes are not a property list, the structure does not
        match the manifest schema, or an item's metadata lacks
        ``bundle-identifier`` / ``bundle-version``.
    """
    logger.debug("Decoding manifest (%d bytes)", len(raw))
    try:
        root = plistlib.loads(raw)
    except Exception as e:
        # plistlib's XML handlers raise assorted builtins on malformed input
        raise DecodeError(f"not a property list: {e}") from e

    _require_type(root, dict, "manifest")
    items = _required(root, 'items', list, "manifest")
    return Manifest(items=tuple(
        _decode_item(item, f"items[{i}]") for i, item in enumerate(items)
    ))
