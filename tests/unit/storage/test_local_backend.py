"""Unit tests for LocalBackend."""

from urllib.parse import parse_qs, urlparse

import pytest

from docvault.storage.backends.local import LocalBackend
from docvault.storage.base import FileNotFoundError, InvalidKeyError


@pytest.fixture
def backend(tmp_path):
    return LocalBackend(base_path=str(tmp_path / "store"), base_url="http://testserver/api/files", signing_secret="k")


@pytest.mark.storage
@pytest.mark.asyncio
class TestLocalBackend:
    async def test_put_writes_file_and_sidecar(self, backend, tmp_path):
        await backend.put("uploads/1-x-a.txt", b"hello", "text/plain", {"owner": "u1"})
        assert (tmp_path / "store" / "uploads" / "1-x-a.txt").read_bytes() == b"hello"
        meta = await backend.get_metadata("uploads/1-x-a.txt")
        assert meta["owner"] == "u1"
        assert meta["content_type"] == "text/plain"

    async def test_get_missing(self, backend):
        with pytest.raises(FileNotFoundError):
            await backend.get("uploads/missing.txt")
        with pytest.raises(FileNotFoundError):
            await backend.get_metadata("uploads/missing.txt")

    async def test_delete_removes_sidecar(self, backend, tmp_path):
        await backend.put("uploads/a.txt", b"x", "text/plain")
        assert await backend.delete("uploads/a.txt") is True
        assert await backend.delete("uploads/a.txt") is False
        assert list((tmp_path / "store" / "uploads").iterdir()) == []

    async def test_list_keys_excludes_metadata(self, backend):
        await backend.put("uploads/a.txt", b"x", "text/plain")
        await backend.put("uploads/b.txt", b"y", "text/plain")
        assert await backend.list_keys("uploads/") == ["uploads/a.txt", "uploads/b.txt"]

    async def test_list_keys_empty_root(self, backend):
        assert await backend.list_keys() == []

    async def test_rejects_traversal(self, backend):
        with pytest.raises(InvalidKeyError):
            await backend.put("../outside.txt", b"x", "text/plain")

    async def test_signed_url_verifies(self, backend):
        await backend.put("uploads/a.txt", b"x", "text/plain")
        url = await backend.get_url("uploads/a.txt", expires_in=60, download=True)
        qs = parse_qs(urlparse(url).query)
        assert qs["download"] == ["true"]
        assert backend.verify_url("uploads/a.txt", qs["expires"][0], qs["signature"][0], True)
        assert not backend.verify_url("uploads/a.txt", qs["expires"][0], qs["signature"][0], False)
        assert not backend.verify_url("uploads/b.txt", qs["expires"][0], qs["signature"][0], True)
