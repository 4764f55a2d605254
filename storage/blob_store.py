# -*- coding: utf-8 -*-
"""storage/blob_store.py

Key-value blob stores holding one JSON text per collection.

Variants:
- MemoryBlobStore : in-process dict (tests, throwaway sessions)
- FileBlobStore   : ``<folder>/<key>.json``, atomic replace on write
- RemoteBlobStore : HTTP GET/PUT/DELETE of ``<base_url>/<key>``

All variants raise ``StoreError`` subclasses; a failed ``set`` leaves the
previous blob in place.
"""

from __future__ import annotations

import errno
import logging
import os
import re
import tempfile
import threading
import urllib.error
import urllib.request
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Dict, Optional

from app.config import DEFAULT_REMOTE_TIMEOUT_S, REMOTE_USER_AGENT
from services.errors import QuotaExceededError, StoreCorruptedError, StoreUnavailableError

log = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


def _check_key(key: str) -> str:
    if not isinstance(key, str) or not _KEY_RE.match(key):
        raise ValueError(f"Invalid store key: {key!r}")
    return key


def _check_quota(key: str, text: str, quota_bytes: int) -> None:
    if quota_bytes and len(text.encode("utf-8")) > quota_bytes:
        raise QuotaExceededError(
            f"Collection '{key}' needs {len(text.encode('utf-8'))} bytes; quota is {quota_bytes} bytes"
        )


class BlobStore(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored text, or None when the key was never written."""

    @abstractmethod
    def set(self, key: str, text: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        ...

    def describe(self) -> str:
        return type(self).__name__


class MemoryBlobStore(BlobStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None, *, quota_bytes: int = 0) -> None:
        self._data: Dict[str, str] = dict(initial or {})
        self._quota_bytes = int(quota_bytes or 0)
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(_check_key(key))

    def set(self, key: str, text: str) -> None:
        _check_quota(_check_key(key), text, self._quota_bytes)
        with self._lock:
            self._data[key] = text

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(_check_key(key), None)

    def describe(self) -> str:
        return "memory"


class FileBlobStore(BlobStore):
    def __init__(self, folder: Path | str, *, quota_bytes: int = 0) -> None:
        self.folder = Path(folder)
        self._quota_bytes = int(quota_bytes or 0)

    def _path(self, key: str) -> Path:
        return self.folder / f"{_check_key(key)}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise StoreCorruptedError(f"{path} is not UTF-8 text: {e}") from e
        except OSError as e:
            raise StoreUnavailableError(f"Cannot read {path}: {e}") from e

    def set(self, key: str, text: str) -> None:
        path = self._path(key)
        _check_quota(key, text, self._quota_bytes)
        tmp_name = ""
        try:
            self.folder.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=str(self.folder))
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
            tmp_name = ""
            log.debug("Wrote %s (%d chars)", path, len(text))
        except OSError as e:
            if e.errno in (errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)):
                raise QuotaExceededError(f"No space left writing {path}") from e
            raise StoreUnavailableError(f"Cannot write {path}: {e}") from e
        finally:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)

    def remove(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StoreUnavailableError(f"Cannot remove {path}: {e}") from e

    def describe(self) -> str:
        return f"file:{self.folder}"


class RemoteBlobStore(BlobStore):
    """Blob store behind a plain HTTP key-value endpoint.

    ``GET <base>/<key>`` returns the JSON text (404 when absent),
    ``PUT <base>/<key>`` replaces it, ``DELETE <base>/<key>`` removes it.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_s: float = DEFAULT_REMOTE_TIMEOUT_S,
        urlopen: Optional[Callable] = None,
    ) -> None:
        if not base_url:
            raise ValueError("RemoteBlobStore needs a base_url")
        self.base_url = base_url.rstrip("/")
        self.timeout_s = float(timeout_s)
        self._urlopen = urlopen or urllib.request.urlopen

    def _url(self, key: str) -> str:
        return f"{self.base_url}/{_check_key(key)}"

    def _request(self, method: str, key: str, body: Optional[bytes] = None):
        headers = {"User-Agent": REMOTE_USER_AGENT, "Accept": "application/json"}
        if body is not None:
            headers["Content-Type"] = "application/json; charset=utf-8"
        req = urllib.request.Request(self._url(key), data=body, headers=headers, method=method)
        return self._urlopen(req, timeout=self.timeout_s)

    def get(self, key: str) -> Optional[str]:
        try:
            with self._request("GET", key) as resp:
                return resp.read().decode("utf-8")
        except UnicodeDecodeError as e:
            raise StoreCorruptedError(f"GET {self._url(key)} returned non UTF-8 data: {e}") from e
        except urllib.error.HTTPError as e:
            if e.code == 404:
                return None
            raise StoreUnavailableError(f"GET {self._url(key)} failed: HTTP {e.code}") from e
        except (urllib.error.URLError, OSError) as e:
            raise StoreUnavailableError(f"GET {self._url(key)} failed: {e}") from e

    def set(self, key: str, text: str) -> None:
        try:
            with self._request("PUT", key, text.encode("utf-8")) as resp:
                resp.read()
        except urllib.error.HTTPError as e:
            if e.code in (413, 507):
                raise QuotaExceededError(f"PUT {self._url(key)} rejected: HTTP {e.code}") from e
            raise StoreUnavailableError(f"PUT {self._url(key)} failed: HTTP {e.code}") from e
        except (urllib.error.URLError, OSError) as e:
            raise StoreUnavailableError(f"PUT {self._url(key)} failed: {e}") from e

    def remove(self, key: str) -> None:
        try:
            with self._request("DELETE", key) as resp:
                resp.read()
        except urllib.error.HTTPError as e:
            if e.code == 404:
                return
            raise StoreUnavailableError(f"DELETE {self._url(key)} failed: HTTP {e.code}") from e
        except (urllib.error.URLError, OSError) as e:
            raise StoreUnavailableError(f"DELETE {self._url(key)} failed: {e}") from e

    def describe(self) -> str:
        return f"remote:{self.base_url}"
