# -*- coding: utf-8 -*-
"""
Version Ordering - Semantic comparison of version folder names.

Version folders are free-form names such as ``v1.0.5``. They are
compared numerically component by component after normalization.
Every ordering of versions in the package goes through
``compare_versions`` so list order and "latest" never disagree.

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
import functools
import locale
import re
from typing import Iterable, List, Optional, Sequence

# Appstore internal
from appstore.catalog.models import AppVersion


_NUMERIC = re.compile(r"[0-9]+")


def _normalize(version: str) -> str:
    return version.lower().strip().replace("v", "")


def _numeric_parts(normalized: str) -> List[int]:
    # Non-numeric components (e.g. "0-beta") are dropped, not zeroed.
    return [
        int(part) for part in normalized.split(".")
        if _NUMERIC.fullmatch(part)
    ]


def compare_text(first: str, second: str) -> int:
    """Case-insensitive, locale-aware three-way string comparison."""
    a = locale.strxfrm(first.casefold())
    b = locale.strxfrm(second.casefold())
    return (a > b) - (a < b)


def compare_versions(first: str, second: str) -> int:
    """Three-way comparison of two version strings.

    Parameters
    ----------
    first : str
    second : str

    Returns
    -------
    int
        -1 if ``first`` is older, 0 if equal, 1 if newer.

    Notes
    -----
    Both strings are lowercased, trimmed and stripped of every ``v``.
    Dot-separated integer components are compared after zero-padding the
    shorter sequence, so ``1.0`` equals ``1.0.0``. Only when both
    component lists have the same length and values is the normalized
    text compared as a tie-break.
    """
    norm_a = _normalize(first)
    norm_b = _normalize(second)
    parts_a = _numeric_parts(norm_a)
    parts_b = _numeric_parts(norm_b)

    width = max(len(parts_a), len(parts_b))
    for i in range(width):
        x = parts_a[i] if i < len(parts_a) else 0
        y = parts_b[i] if i < len(parts_b) else 0
        if x != y:
            return -1 if x < y else 1

    if len(parts_a) != len(parts_b):
        return 0
    return compare_text(norm_a, norm_b)


version_key = functools.cmp_to_key(compare_versions)


def sort_versions(versions: Iterable[AppVersion]) -> List[AppVersion]:
    """Return versions ordered newest first."""
    return sorted(
        versions, key=lambda v: version_key(v.version), reverse=True
    )


def latest_version(versions: Sequence[AppVersion]) -> Optional[AppVersion]:
    """Return the newest version, or None for an empty sequence."""
    if not versions:
        return None
    return max(versions, key=lambda v: version_key(v.version))
