"""Signed URL issuing and verification."""

import time
from urllib.parse import parse_qs, urlparse

import pytest

from docvault.storage.signing import URLSigner


def _parts(url):
    parsed = urlparse(url)
    qs = parse_qs(parsed.query)
    return parsed.path, qs["expires"][0], qs["signature"][0]


@pytest.mark.security
class TestURLSigner:
    def test_requires_secret(self):
        with pytest.raises(ValueError):
            URLSigner("", "http://x")

    def test_round_trip(self):
        signer = URLSigner("secret", "http://testserver/api/files/")
        url = signer.sign("uploads/a.txt", 60)
        path, expires, sig = _parts(url)
        assert path == "/api/files/uploads/a.txt"
        assert signer.verify("uploads/a.txt", expires, sig)

    def test_expired(self):
        signer = URLSigner("secret", "http://x")
        _, expires, sig = _parts(signer.sign("a.txt", 60, now=time.time() - 120))
        assert not signer.verify("a.txt", expires, sig)

    def test_tampered_expiry(self):
        signer = URLSigner("secret", "http://x")
        _, expires, sig = _parts(signer.sign("a.txt", 60))
        assert not signer.verify("a.txt", str(int(expires) + 1000), sig)

    def test_other_secret(self):
        _, expires, sig = _parts(URLSigner("one", "http://x").sign("a.txt", 60))
        assert not URLSigner("two", "http://x").verify("a.txt", expires, sig)

    @pytest.mark.parametrize("expires", ["", "soon", None])
    def test_garbage_expiry(self, expires):
        assert not URLSigner("secret", "http://x").verify("a.txt", expires, "sig")
