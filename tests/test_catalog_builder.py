# -*- coding: utf-8 -*-
"""
Tests for appstore.catalog.builder - Version, app and catalog building.

Created
-------
2026-02-06
"""

import plistlib

import pytest

from appstore.catalog.builder import (
    build_app,
    build_catalog,
    build_version,
    find_image,
    find_manifest,
)
from appstore.catalog.errors import FetchError
from appstore.catalog.versioning import compare_versions
from appstore.storage.base import FileHandle, FolderHandle


def _folder(path):
    return FolderHandle(path=path, name=path.rsplit("/", 1)[-1])


def _files(*names):
    return [FileHandle(path=f"dir/{n}", name=n) for n in names]


@pytest.fixture
def populated(fake_storage, make_manifest, utc):
    """Three apps in deliberately unsorted listing order."""
    s = fake_storage
    for name, versions in [
        ("maps", ["v2.0", "v10.0", "v9.1"]),
        ("EduConnect", ["v1.0.0", "v1.0.5"]),
        ("Attendance", ["1.2.0"]),
    ]:
        for day, version in enumerate(versions, start=1):
            base = f"Apps/{name}/{version}"
            s.add_file(
                f"{base}/manifest.plist",
                make_manifest(
                    bundle_version=version.lstrip("v"),
                    description=f"{name} {version}",
                ),
                mtime=utc(2025, 9, day),
            )
            s.add_file(f"{base}/icon.png", b"png", mtime=utc(2025, 9, day, 12))
            s.add_file(f"{base}/{name}.ipa", b"ipa", mtime=utc(2025, 9, day, 6))
    return s


class TestFileSelection:

    def test_manifest_case_insensitive(self):
        files = _files("App.ipa", "Manifest.PLIST")
        assert find_manifest(files).name == "Manifest.PLIST"

    def test_manifest_exact_name_only(self):
        assert find_manifest(_files("manifest.plist.bak", "old-manifest.plist")) is None

    def test_first_image_in_listing_order(self):
        files = _files("App.ipa", "shot.JPEG", "icon.png")
        assert find_image(files).name == "shot.JPEG"

    @pytest.mark.parametrize("name", ["a.png", "a.jpg", "a.jpeg", "a.WEBP"])
    def test_image_extensions(self, name):
        assert find_image(_files(name)).name == name

    def test_no_image(self):
        assert find_image(_files("App.ipa", "icon.gif", "png")) is None


class TestBuildVersion:

    def test_full_version(self, fake_storage, make_manifest, utc):
        s = fake_storage
        s.add_file("Apps/Edu/v1.0.5/Edu.ipa", b"ipa", mtime=utc(2025, 9, 1))
        s.add_file(
            "Apps/Edu/v1.0.5/manifest.plist",
            make_manifest(bundle_version="1.0.5", description="Faster."),
            mtime=utc(2025, 9, 3),
        )
        s.add_file("Apps/Edu/v1.0.5/icon.webp", b"img", mtime=utc(2025, 9, 2))

        v = build_version("Edu", _folder("Apps/Edu/v1.0.5"), s)

        assert v.app_name == "Edu"
        assert v.version == "v1.0.5"
        assert v.manifest_url == (
            "https://storage.example/Apps/Edu/v1.0.5/manifest.plist?token=t"
        )
        assert v.manifest is not None
        assert v.bundle_version == "1.0.5"
        assert v.description == "Faster."
        assert v.image_name == "icon.webp"
        assert v.timestamp == utc(2025, 9, 3)

    def test_no_manifest(self, fake_storage, utc):
        s = fake_storage
        s.add_file("Apps/Edu/v1/Edu.ipa", b"ipa", mtime=utc(2025, 1, 1))

        v = build_version("Edu", _folder("Apps/Edu/v1"), s)

        assert v.manifest is None
        assert v.manifest_url is None
        assert v.description is None
        assert v.timestamp == utc(2025, 1, 1)
        assert not any(kind == "bytes" for kind, _ in s.calls)

    def test_corrupt_manifest_keeps_url(self, fake_storage):
        s = fake_storage
        s.add_file("Apps/Edu/v1/manifest.plist", b"\x00garbage")

        v = build_version("Edu", _folder("Apps/Edu/v1"), s)

        assert v.manifest is None
        assert v.description is None
        assert v.manifest_url is not None

    def test_manifest_missing_required_field(self, fake_storage):
        s = fake_storage
        s.add_file("Apps/Edu/v1/manifest.plist", plistlib.dumps({
            'items': [{'assets': [], 'metadata': {'bundle-version': '1'}}],
        }))
        v = build_version("Edu", _folder("Apps/Edu/v1"), s)
        assert v.manifest is None
        assert v.manifest_url is not None

    def test_oversize_manifest_not_decoded(self, fake_storage, make_manifest):
        s = fake_storage
        raw = make_manifest()
        s.add_file("Apps/Edu/v1/manifest.plist", raw)

        v = build_version(
            "Edu", _folder("Apps/Edu/v1"), s, max_manifest_bytes=len(raw) - 1,
        )
        assert v.manifest is None
        assert v.manifest_url is not None

    def test_url_failure_still_decodes(self, fake_storage, make_manifest):
        s = fake_storage
        s.add_file("Apps/Edu/v1/manifest.plist",
                   make_manifest(description="d"))
        s.fail_url.add("Apps/Edu/v1/manifest.plist")

        v = build_version("Edu", _folder("Apps/Edu/v1"), s)

        assert v.manifest_url is None
        assert v.manifest is not None
        assert v.description == "d"
        assert v.install_url is None

    def test_download_failure(self, fake_storage, make_manifest):
        s = fake_storage
        s.add_file("Apps/Edu/v1/manifest.plist", make_manifest())
        s.fail_bytes.add("Apps/Edu/v1/manifest.plist")

        v = build_version("Edu", _folder("Apps/Edu/v1"), s)
        assert v.manifest is None
        assert v.manifest_url is not None

    def test_manifest_without_description(self, fake_storage, make_manifest):
        s = fake_storage
        s.add_file("Apps/Edu/v1/manifest.plist", make_manifest())
        v = build_version("Edu", _folder("Apps/Edu/v1"), s)
        assert v.manifest is not None
        assert v.description is None

    def test_timestamp_skips_failed_metadata(self, fake_storage, utc):
        s = fake_storage
        s.add_file("Apps/Edu/v1/a.ipa", b"", mtime=utc(2025, 3, 1))
        s.add_file("Apps/Edu/v1/b.png", b"")  # no metadata
        s.add_file("Apps/Edu/v1/c.txt", b"", mtime=utc(2025, 2, 1))

        v = build_version("Edu", _folder("Apps/Edu/v1"), s)
        assert v.timestamp == utc(2025, 3, 1)

    def test_timestamp_absent_when_no_metadata(self, fake_storage):
        s = fake_storage
        s.add_file("Apps/Edu/v1/a.ipa", b"")
        v = build_version("Edu", _folder("Apps/Edu/v1"), s)
        assert v.timestamp is None

    def test_empty_folder(self, fake_storage):
        fake_storage.add_folder("Apps/Edu/v1")
        v = build_version("Edu", _folder("Apps/Edu/v1"), fake_storage)
        assert v.version == "v1"
        assert v.manifest is None
        assert v.image_name is None
        assert v.timestamp is None

    def test_listing_failure_degrades(self, fake_storage):
        fake_storage.add_folder("Apps/Edu/v1")
        fake_storage.fail_listing.add("Apps/Edu/v1")
        v = build_version("Edu", _folder("Apps/Edu/v1"), fake_storage)
        assert v.version == "v1"
        assert v.manifest_url is None

    def test_files_listed_once_not_recursively(self, fake_storage, make_manifest):
        s = fake_storage
        s.add_file("Apps/Edu/v1/manifest.plist", make_manifest())
        s.add_file("Apps/Edu/v1/nested/icon.png", b"")

        v = build_version("Edu", _folder("Apps/Edu/v1"), s)

        assert v.image_name is None
        assert s.calls.count(("list", "Apps/Edu/v1")) == 1
        assert ("list", "Apps/Edu/v1/nested") not in s.calls

    def test_version_name_not_validated(self, fake_storage):
        fake_storage.add_folder("Apps/Edu/nightly build")
        v = build_version("Edu", _folder("Apps/Edu/nightly build"), fake_storage)
        assert v.version == "nightly build"


class TestBuildApp:

    def test_versions_sorted_descending(self, populated):
        app = build_app(_folder("Apps/maps"), populated)
        assert [v.version for v in app.versions] == ["v10.0", "v9.1", "v2.0"]
        assert app.id == app.name == "maps"

    def test_listing_failure_yields_empty_app(self, populated):
        populated.fail_listing.add("Apps/maps")
        app = build_app(_folder("Apps/maps"), populated)
        assert app.name == "maps"
        assert app.versions == ()

    def test_versions_built_in_listing_order(self, populated):
        build_app(_folder("Apps/maps"), populated)
        listed = [p for kind, p in populated.calls
                  if kind == "list" and p.startswith("Apps/maps/")]
        assert listed == ["Apps/maps/v2.0", "Apps/maps/v10.0", "Apps/maps/v9.1"]


class TestBuildCatalog:

    def test_end_to_end_educonnect(self, fake_storage, make_manifest):
        s = fake_storage
        for version in ("v1.0.0", "v1.0.5"):
            s.add_file(
                f"Apps/EduConnect/{version}/manifest.plist",
                make_manifest(bundle_version=version[1:]),
            )

        catalog = build_catalog(s, "Apps")

        assert len(catalog) == 1
        app = catalog.apps[0]
        assert app.name == "EduConnect"
        assert app.versions[0].version == "v1.0.5"
        assert app.versions[0].bundle_version == "1.0.5"
        assert app.versions[1].version == "v1.0.0"

    def test_apps_sorted_case_insensitive(self, populated):
        catalog = build_catalog(populated, "Apps")
        names = [a.name for a in catalog]
        assert names == ["Attendance", "EduConnect", "maps"]
        for a, b in zip(names, names[1:]):
            assert a.casefold() <= b.casefold()

    def test_every_app_versions_non_increasing(self, populated):
        for app in build_catalog(populated, "Apps"):
            for newer, older in zip(app.versions, app.versions[1:]):
                assert compare_versions(newer.version, older.version) >= 0

    def test_idempotent(self, populated):
        assert build_catalog(populated, "Apps") == build_catalog(populated, "Apps")

    def test_stray_root_files_ignored(self, populated):
        populated.add_file("Apps/README.txt", b"hello")
        catalog = build_catalog(populated, "Apps")
        assert [a.name for a in catalog] == ["Attendance", "EduConnect", "maps"]

    def test_empty_root(self, fake_storage):
        fake_storage.add_folder("Apps")
        assert len(build_catalog(fake_storage, "Apps")) == 0

    def test_root_listing_failure_is_fatal(self, populated):
        populated.fail_listing.add("Apps")
        with pytest.raises(FetchError):
            build_catalog(populated, "Apps")

    @pytest.mark.parametrize("raw", [
        b"corrupt",
        b"<plist><dict><key>items</key><date>not-a-date</date></dict></plist>",
        b"<plist><key>x</key></plist>",
    ])
    def test_corrupt_version_does_not_break_siblings(self, populated, raw):
        populated.content["Apps/maps/v10.0/manifest.plist"] = raw
        catalog = build_catalog(populated, "Apps")

        maps = catalog.find("maps")
        broken = maps.find_version("v10.0")
        assert broken.manifest is None
        assert broken.description is None
        assert maps.find_version("v9.1").description == "maps v9.1"
        assert catalog.find("EduConnect").versions[0].manifest is not None

    def test_failed_app_listing_keeps_other_apps(self, populated):
        populated.fail_listing.add("Apps/EduConnect")
        catalog = build_catalog(populated, "Apps")
        assert catalog.find("EduConnect").versions == ()
        assert len(catalog.find("maps").versions) == 3

    def test_parallel_build_matches_sequential(self, populated):
        sequential = build_catalog(populated, "Apps")
        parallel = build_catalog(populated, "Apps", max_workers=3)
        assert parallel == sequential

    def test_fields_populated(self, populated, utc):
        edu = build_catalog(populated, "Apps").find("EduConnect")
        latest = edu.versions[0]
        assert latest.image_name == "icon.png"
        assert latest.description == "EduConnect v1.0.5"
        assert latest.timestamp == utc(2025, 9, 2, 12)
        assert latest.package_url == "https://example.com/downloads/EduConnect.ipa"
