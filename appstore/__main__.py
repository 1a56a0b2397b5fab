# -*- coding: utf-8 -*-
"""
appstore CLI - Headless catalog inspection.

Usage::

    python -m appstore list
    python -m appstore --backend local --local-dir ./bucket list --format yaml
    python -m appstore show EduConnect
    python -m appstore install-url EduConnect v1.0.4

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

import argparse
import json
import locale
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

logger = logging.getLogger(__name__)

from appstore.catalog.errors import CatalogError
from appstore.catalog.models import App, AppVersion, Catalog
from appstore.catalog.service import CatalogService
from appstore.core.config import BACKENDS, AppStoreConfig, load_config
from appstore.storage import open_storage


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="appstore",
        description="Inspect the internal app catalog and its install links.",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to a JSON config file (default: ~/.appstore/config.json).",
    )
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        default=None,
        help="Storage backend to read from.",
    )
    parser.add_argument(
        "--local-dir",
        default=None,
        help="Directory served by the local backend.",
    )
    parser.add_argument(
        "--bucket",
        default=None,
        help="Firebase Storage bucket name.",
    )
    parser.add_argument(
        "--root",
        dest="root_path",
        default=None,
        help="Folder holding the app folders (default: Apps).",
    )
    parser.add_argument(
        "-j", "--workers",
        type=int,
        default=None,
        help="Number of apps to build concurrently.",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output (DEBUG level).",
    )
    verbosity.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only show warnings and errors.",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="List apps and versions.")
    list_cmd.add_argument(
        "--format",
        choices=("text", "json", "yaml"),
        default="text",
        help="Output format (default: text).",
    )

    show_cmd = commands.add_parser("show", help="Show every version of an app.")
    show_cmd.add_argument("app", help="App name (case-insensitive).")

    url_cmd = commands.add_parser(
        "install-url", help="Print the itms-services install link.",
    )
    url_cmd.add_argument("app", help="App name (case-insensitive).")
    url_cmd.add_argument(
        "version", nargs="?", default=None,
        help="Version folder name (default: latest).",
    )
    return parser


def _apply_overrides(config: AppStoreConfig,
                     args: argparse.Namespace) -> AppStoreConfig:
    if args.backend:
        config.backend = args.backend
    if args.local_dir:
        config.local_dir = args.local_dir
        if not args.backend:
            config.backend = "local"
    if args.bucket:
        config.bucket = args.bucket
    if args.root_path:
        config.root_path = args.root_path
    if args.workers is not None:
        config.max_workers = args.workers
    return config


def _format_version_line(version: AppVersion) -> str:
    parts = [version.version]
    if version.bundle_version:
        parts.append(f"build {version.bundle_version}")
    if version.timestamp:
        parts.append(f"updated {version.timestamp:%Y-%m-%d %H:%M}")
    if not version.manifest_url:
        parts.append("no manifest")
    return ", ".join(parts)


def _print_catalog(catalog: Catalog, fmt: str) -> None:
    if fmt == "json":
        print(json.dumps(catalog.to_dict(), indent=2))
    elif fmt == "yaml":
        print(yaml.safe_dump(
            catalog.to_dict(), default_flow_style=False, sort_keys=False,
        ), end="")
    else:
        for app in catalog:
            latest = app.latest
            print(f"{app.name}  (latest: {latest.version if latest else '-'},"
                  f" {len(app.versions)} versions)")


def _print_app(app: App) -> None:
    latest = app.latest
    title = latest.title if latest and latest.title else app.name
    print(title)
    if latest and latest.bundle_identifier:
        print(f"  {latest.bundle_identifier}")
    for version in app.versions:
        print(f"  - {_format_version_line(version)}")
        if version.description:
            print(f"      {version.description}")


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.debug("Keeping default collation: %s", e)

    config = _apply_overrides(load_config(args.config), args)

    try:
        storage = open_storage(config)
        with CatalogService(
            storage,
            root_path=config.root_path,
            max_workers=config.max_workers,
            max_manifest_bytes=config.max_manifest_bytes,
        ) as service:
            catalog = service.refresh()
    except (CatalogError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.command == "list":
        _print_catalog(catalog, args.format)
        return 0

    app = catalog.find(args.app)
    if app is None:
        print(f"Error: no app named {args.app!r}", file=sys.stderr)
        return 1

    if args.command == "show":
        _print_app(app)
        return 0

    version = app.find_version(args.version) if args.version else app.latest
    if version is None:
        print(f"Error: {app.name} has no version {args.version!r}",
              file=sys.stderr)
        return 1
    if version.install_url is None:
        print(f"Error: {version.id} has no manifest available for install",
              file=sys.stderr)
        return 1
    print(version.install_url)
    return 0


if __name__ == "__main__":
    sys.exit(main())
