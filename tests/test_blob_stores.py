# -*- coding: utf-8 -*-
import io
import os
import urllib.error

import pytest

from services.errors import QuotaExceededError, StoreCorruptedError, StoreUnavailableError
from storage.blob_store import FileBlobStore, MemoryBlobStore, RemoteBlobStore
from storage.repository import RecordStore


def test_memory_store_basics():
    s = MemoryBlobStore()
    assert s.get("controller_docs") is None
    s.set("controller_docs", "[]")
    assert s.get("controller_docs") == "[]"
    s.remove("controller_docs")
    s.remove("controller_docs")
    assert s.get("controller_docs") is None


def test_keys_are_validated():
    with pytest.raises(ValueError):
        MemoryBlobStore().get("../etc/passwd")


def test_file_store_writes_atomically(tmp_path):
    s = FileBlobStore(tmp_path / "data")
    assert s.get("controller_docs") is None
    s.set("controller_docs", '[{"id": "a"}]')
    s.set("controller_docs", '[{"id": "b"}]')
    assert s.get("controller_docs") == '[{"id": "b"}]'
    assert sorted(os.listdir(tmp_path / "data")) == ["controller_docs.json"]

    s.remove("controller_docs")
    assert s.get("controller_docs") is None


def test_file_store_quota(tmp_path):
    s = FileBlobStore(tmp_path, quota_bytes=8)
    s.set("fixture_configs", "[]")
    with pytest.raises(QuotaExceededError):
        s.set("fixture_configs", "[" + " " * 20 + "]")
    assert s.get("fixture_configs") == "[]"


def test_file_store_failed_replace_keeps_previous(tmp_path, monkeypatch):
    s = FileBlobStore(tmp_path)
    s.set("controller_docs", "[1]")

    def boom(src, dst):
        raise PermissionError(13, "denied")

    monkeypatch.setattr(os, "replace", boom)
    with pytest.raises(StoreUnavailableError):
        s.set("controller_docs", "[2]")
    monkeypatch.undo()

    assert s.get("controller_docs") == "[1]"
    assert sorted(os.listdir(tmp_path)) == ["controller_docs.json"]


class _Resp(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


class FakeServer:
    """In-memory stand-in for urllib.request.urlopen."""

    def __init__(self, fail_put_with=None):
        self.data = {}
        self.calls = []
        self.fail_put_with = fail_put_with

    def __call__(self, req, timeout=None):
        key = req.full_url.rsplit("/", 1)[-1]
        method = req.get_method()
        self.calls.append((method, req.full_url, timeout))
        if method == "GET":
            if key not in self.data:
                raise urllib.error.HTTPError(req.full_url, 404, "Not Found", None, None)
            return _Resp(self.data[key])
        if method == "PUT":
            if self.fail_put_with:
                raise urllib.error.HTTPError(req.full_url, self.fail_put_with, "fail", None, None)
            self.data[key] = req.data
            return _Resp(b"")
        if method == "DELETE":
            if key not in self.data:
                raise urllib.error.HTTPError(req.full_url, 404, "Not Found", None, None)
            del self.data[key]
            return _Resp(b"")
        raise AssertionError(method)


def test_remote_store_roundtrip():
    server = FakeServer()
    s = RemoteBlobStore("http://kv.local/store/", timeout_s=2.5, urlopen=server)
    assert s.get("controller_docs") is None
    s.set("controller_docs", '["é"]')
    assert s.get("controller_docs") == '["é"]'
    s.remove("controller_docs")
    s.remove("controller_docs")
    assert server.calls[0] == ("GET", "http://kv.local/store/controller_docs", 2.5)


@pytest.mark.parametrize("code,exc", [(413, QuotaExceededError), (507, QuotaExceededError), (500, StoreUnavailableError)])
def test_remote_store_put_errors(code, exc):
    s = RemoteBlobStore("http://kv.local", urlopen=FakeServer(fail_put_with=code))
    with pytest.raises(exc):
        s.set("controller_docs", "[]")


def test_remote_store_unreachable():
    def down(req, timeout=None):
        raise urllib.error.URLError("connection refused")

    s = RemoteBlobStore("http://kv.local", urlopen=down)
    with pytest.raises(StoreUnavailableError):
        s.get("controller_docs")
    with pytest.raises(ValueError):
        RemoteBlobStore("")


def test_file_store_rejects_non_utf8_blob(tmp_path):
    (tmp_path / "controller_docs.json").write_bytes(b'[{"campus": "\xff"}]')
    with pytest.raises(StoreCorruptedError):
        RecordStore(FileBlobStore(tmp_path)).get_controllers()


def test_remote_store_rejects_non_utf8_blob():
    server = FakeServer()
    server.data["controller_docs"] = b'["\xff"]'
    with pytest.raises(StoreCorruptedError):
        RemoteBlobStore("http://kv.local", urlopen=server).get("controller_docs")
