# -*- coding: utf-8 -*-
"""
Catalog Models - Value records for apps, versions and install manifests.

Defines the immutable records produced by the catalog builder: the
``Catalog`` of ``App`` entries, each holding its ``AppVersion`` list,
and the decoded ``Manifest`` tree of an over-the-air install manifest.

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
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple


class AssetKind(Enum):
    """Known ``kind`` tags of a manifest asset.

    Tags not listed here resolve to ``UNKNOWN`` so new asset kinds in a
    manifest never break decoding.
    """

    SOFTWARE_PACKAGE = "software-package"
    DISPLAY_IMAGE = "display-image"
    FULL_SIZE_IMAGE = "full-size-image"
    UNKNOWN = "unknown"

    @classmethod
    def from_tag(cls, tag: str) -> 'AssetKind':
        """Map a wire ``kind`` string to its variant.

        Parameters
        ----------
        tag : str
            Raw ``kind`` value from the manifest.

        Returns
        -------
        AssetKind
            Matching variant, or ``UNKNOWN``.
        """
        for member in cls:
            if member is not cls.UNKNOWN and member.value == tag:
                return member
        return cls.UNKNOWN


@dataclass(frozen=True)
class ManifestAsset:
    """One downloadable asset listed in a manifest item."""

    kind: str
    url: Optional[str] = None
    needs_shine: Optional[bool] = None

    @property
    def asset_kind(self) -> AssetKind:
        return AssetKind.from_tag(self.kind)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'url': self.url,
            'needs_shine': self.needs_shine,
        }


@dataclass(frozen=True)
class ManifestMetadata:
    """Bundle metadata of a manifest item.

    Attributes
    ----------
    bundle_identifier : str
        Wire key ``bundle-identifier``.
    bundle_version : str
        Wire key ``bundle-version``.
    kind : Optional[str]
        Usually ``'software'``.
    platform_identifier : Optional[str]
        Wire key ``platform-identifier``.
    title : Optional[str]
        Display title of the app.
    description : Optional[str]
        Free-text release description.
    """

    bundle_identifier: str
    bundle_version: str
    kind: Optional[str] = None
    platform_identifier: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'bundle_identifier': self.bundle_identifier,
            'bundle_version': self.bundle_version,
            'kind': self.kind,
            'platform_identifier': self.platform_identifier,
            'title': self.title,
            'description': self.description,
        }


@dataclass(frozen=True)
class ManifestItem:
    """A single installable entry of a manifest."""

    assets: Tuple[ManifestAsset, ...]
    metadata: ManifestMetadata

    def asset(self, kind: AssetKind) -> Optional[ManifestAsset]:
        """Return the first asset of the given kind, if any."""
        for entry in self.assets:
            if entry.asset_kind is kind:
                return entry
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'assets': [a.to_dict() for a in self.assets],
            'metadata': self.metadata.to_dict(),
        }


@dataclass(frozen=True)
class Manifest:
    """Decoded over-the-air install manifest (``manifest.plist``)."""

    items: Tuple[ManifestItem, ...]

    @property
    def first_item(self) -> Optional[ManifestItem]:
        return self.items[0] if self.items else None

    def to_dict(self) -> Dict[str, Any]:
        return {'items': [i.to_dict() for i in self.items]}


@dataclass(frozen=True)
class AppVersion:
    """One version folder of an app.

    Parameters
    ----------
    app_name : str
        Name of the owning app folder.
    version : str
        Raw version folder name, e.g. ``'v1.0.5'``. Not validated.
    manifest_url : Optional[str]
        Download URL of ``manifest.plist``.
    image_name : Optional[str]
        File name of the first image in the folder.
    description : Optional[str]
        Copied from the manifest's first item metadata.
    timestamp : Optional[datetime]
        Latest modification time across the folder's files.
    manifest : Optional[Manifest]
        Decoded manifest, if present and well formed.
    build : Optional[str]
        Build label. Not populated by the catalog builder.
    """

    app_name: str
    version: str
    manifest_url: Optional[str] = None
    image_name: Optional[str] = None
    description: Optional[str] = None
    timestamp: Optional[datetime] = None
    manifest: Optional[Manifest] = None
    build: Optional[str] = None

    @property
    def id(self) -> str:
        return f"{self.app_name}-{self.version}"

    @property
    def _metadata(self) -> Optional[ManifestMetadata]:
        item = self.manifest.first_item if self.manifest else None
        return item.metadata if item else None

    def _asset_url(self, kind: AssetKind) -> Optional[str]:
        item = self.manifest.first_item if self.manifest else None
        if item is None:
            return None
        found = item.asset(kind)
        return found.url if found else None

    @property
    def package_url(self) -> Optional[str]:
        """URL of the installable package (``software-package`` asset)."""
        return self._asset_url(AssetKind.SOFTWARE_PACKAGE)

    @property
    def display_image_url(self) -> Optional[str]:
        return self._asset_url(AssetKind.DISPLAY_IMAGE)

    @property
    def full_size_image_url(self) -> Optional[str]:
        return self._asset_url(AssetKind.FULL_SIZE_IMAGE)

    @property
    def bundle_identifier(self) -> Optional[str]:
        meta = self._metadata
        return meta.bundle_identifier if meta else None

    @property
    def bundle_version(self) -> Optional[str]:
        meta = self._metadata
        return meta.bundle_version if meta else None

    @property
    def title(self) -> Optional[str]:
        meta = self._metadata
        return meta.title if meta else None

    @property
    def install_url(self) -> Optional[str]:
        """``itms-services`` trigger URL, or None without a manifest URL."""
        if not self.manifest_url:
            return None
        from appstore.catalog.install import build_install_url
        return build_install_url(self.manifest_url)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'app_name': self.app_name,
            'version': self.version,
            'manifest_url': self.manifest_url,
            'install_url': self.install_url,
            'image_name': self.image_name,
            'description': self.description,
            'timestamp': (
                self.timestamp.isoformat() if self.timestamp else None
            ),
            'manifest': self.manifest.to_dict() if self.manifest else None,
        }


@dataclass(frozen=True)
class App:
    """An app folder and its versions, newest first."""

    name: str
    versions: Tuple[AppVersion, ...] = ()

    @property
    def id(self) -> str:
        return self.name

    @property
    def latest(self) -> Optional[AppVersion]:
        """Greatest version by the semantic version comparator."""
        from appstore.catalog.versioning import latest_version
        return latest_version(self.versions)

    def find_version(self, version: str) -> Optional[AppVersion]:
        """Look up a version by its raw folder name."""
        for entry in self.versions:
            if entry.version == version:
                return entry
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'versions': [v.to_dict() for v in self.versions],
        }


@dataclass(frozen=True)
class Catalog:
    """Ordered, fully materialized list of apps."""

    apps: Tuple[App, ...] = ()

    def __iter__(self) -> Iterator[App]:
        return iter(self.apps)

    def __len__(self) -> int:
        return len(self.apps)

    def find(self, name: str) -> Optional[App]:
        """Case-insensitive lookup of an app by name."""
        wanted = name.casefold()
        for app in self.apps:
            if app.name.casefold() == wanted:
                return app
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {'apps': [a.to_dict() for a in self.apps]}
