# -*- coding: utf-8 -*-
"""
Firebase Storage - ``StorageClient`` over the Firebase Storage REST API.

Lists bucket prefixes, reads object metadata and downloads objects via
``https://firebasestorage.googleapis.com/v0``. Requests are authorized
with a Firebase ID token, which ``sign_in_anonymously`` obtains from the
Identity Toolkit API.

Dependencies
------------
requests

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
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import quote

# Third-party
import requests

logger = logging.getLogger(__name__)

# Appstore internal
from appstore.catalog.errors import FetchError, MetadataError
from appstore.storage.base import (
    FileHandle,
    FolderHandle,
    Listing,
    StorageClient,
)


_STORAGE_URL = "https://firebasestorage.googleapis.com/v0/b/{bucket}/o"
_SIGN_UP_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signUp"
_CHUNK_SIZE = 65536


def sign_in_anonymously(api_key: str, timeout: float = 10.0) -> str:
    """Create an anonymous Firebase user and return its ID token.

    Parameters
    ----------
    api_key : str
        Web API key of the Firebase project.
    timeout : float
        HTTP request timeout in seconds.

    Returns
    -------
    str
        ID token for the ``Authorization`` header.

    Raises
    ------
    FetchError
        If the sign-up request fails.
    """
    logger.info("Signing in anonymously")
    try:
        resp = requests.post(
            _SIGN_UP_URL,
            params={'key': api_key},
            json={'returnSecureToken': True},
            timeout=timeout,
        )
        resp.raise_for_status()
        data = resp.json()
        token = data['idToken']
    except (requests.RequestException, KeyError, ValueError) as e:
        raise FetchError(f"anonymous sign-in failed: {e}") from e
    logger.info("Signed in, uid=%s", data.get('localId'))
    return token


def _parse_timestamp(value: str) -> datetime:
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class FirebaseStorage(StorageClient):
    """Firebase Storage bucket accessed over REST.

    Parameters
    ----------
    bucket : str
        Bucket name, e.g. ``'my-project.firebasestorage.app'``. A
        ``gs://`` prefix is accepted and stripped.
    id_token : Optional[str]
        Firebase ID token. Without it only public objects are readable.
    timeout : float
        HTTP request timeout in seconds. Default 10.0.
    """

    def __init__(
        self,
        bucket: str,
        id_token: Optional[str] = None,
        timeout: float = 10.0,
    ) -> None:
        if bucket.startswith("gs://"):
            bucket = bucket[len("gs://"):]
        self._bucket = bucket.rstrip("/")
        self._id_token = id_token
        self._timeout = timeout
        self._base_url = _STORAGE_URL.format(bucket=self._bucket)

    @property
    def bucket(self) -> str:
        return self._bucket

    def _headers(self) -> Dict[str, str]:
        if self._id_token:
            return {'Authorization': f"Firebase {self._id_token}"}
        return {}

    def _object_url(self, path: str) -> str:
        return f"{self._base_url}/{quote(path, safe='')}"

    def _get_json(self, url: str, params: Optional[Dict[str, str]] = None
                  ) -> Dict[str, Any]:
        try:
            resp = requests.get(
                url, params=params, headers=self._headers(),
                timeout=self._timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise FetchError(f"request to {url} failed: {e}") from e
        if not isinstance(data, dict):
            raise FetchError(
                f"request to {url} returned {type(data).__name__}, "
                f"expected a JSON object"
            )
        return data

    def _metadata(self, file: FileHandle) -> Dict[str, Any]:
        return self._get_json(self._object_url(file.path))

    def list_children(self, path: str) -> Listing:
        prefix = path.strip("/")
        prefix = f"{prefix}/" if prefix else ""
        params = {'prefix': prefix, 'delimiter': '/'}

        folders: List[FolderHandle] = []
        files: List[FileHandle] = []
        while True:
            data = self._get_json(self._base_url, params=params)
            for sub in data.get('prefixes', []):
                sub_path = sub.rstrip("/")
                folders.append(FolderHandle(
                    path=sub_path, name=sub_path.rsplit("/", 1)[-1],
                ))
            for item in data.get('items', []):
                name = item.get('name', '')
                # Zero-byte "folder" placeholders share the prefix itself.
                if not name or name == prefix:
                    continue
                files.append(FileHandle(
                    path=name, name=name.rsplit("/", 1)[-1],
                ))
            token = data.get('nextPageToken')
            if not token:
                break
            params = dict(params, pageToken=token)

        logger.debug(
            "Listed '%s': %d folders, %d files",
            prefix, len(folders), len(files),
        )
        return Listing(subfolders=tuple(folders), files=tuple(files))

    def get_download_url(self, file: FileHandle) -> str:
        meta = self._metadata(file)
        tokens = [t for t in meta.get('downloadTokens', '').split(',') if t]
        if not tokens:
            raise FetchError(f"no download token for '{file.path}'")
        return (
            f"{self._object_url(file.path)}?alt=media"
            f"&token={quote(tokens[0], safe='')}"
        )

    def get_bytes(self, file: FileHandle, max_bytes: int) -> bytes:
        url = self._object_url(file.path)
        try:
            resp = requests.get(
                url, params={'alt': 'media'}, headers=self._headers(),
                timeout=self._timeout, stream=True,
            )
        except requests.RequestException as e:
            raise FetchError(f"download of '{file.path}' failed: {e}") from e

        try:
            resp.raise_for_status()
            declared = int(resp.headers.get('Content-Length') or 0)
            if declared > max_bytes:
                raise FetchError(
                    f"'{file.path}' is {declared} bytes, limit is {max_bytes}"
                )
            buf = bytearray()
            for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                buf.extend(chunk)
                if len(buf) > max_bytes:
                    raise FetchError(
                        f"'{file.path}' exceeds limit of {max_bytes} bytes"
                    )
            return bytes(buf)
        except (requests.RequestException, ValueError) as e:
            raise FetchError(f"download of '{file.path}' failed: {e}") from e
        finally:
            resp.close()

    def get_last_modified(self, file: FileHandle) -> datetime:
        try:
            meta = self._metadata(file)
            return _parse_timestamp(meta['updated'])
        except (FetchError, AttributeError, KeyError, TypeError,
                ValueError) as e:
            raise MetadataError(
                f"no last-modified time for '{file.path}': {e}"
            ) from e
