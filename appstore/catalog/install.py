# -*- coding: utf-8 -*-
"""
Install Links - Derive ``itms-services`` over-the-air install URLs.

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
from urllib.parse import quote


_ITMS_TEMPLATE = "itms-services://?action=download-manifest&url={url}"


def build_install_url(manifest_url: str) -> str:
    """Build the install-trigger URL for a manifest download URL.

    The manifest URL is percent-encoded with an empty safe set, so
    reserved characters such as ``&``, ``=``, ``+``, ``:``, ``/`` and
    ``?`` are escaped and cannot leak into the outer query string.

    Parameters
    ----------
    manifest_url : str
        Download URL of ``manifest.plist``.

    Returns
    -------
    str
        ``itms-services://?action=download-manifest&url=<encoded>``.
    """
    return _ITMS_TEMPLATE.format(url=quote(manifest_url, safe=""))
