"""Login, callback and sign-out routes with a fake identity provider."""

from urllib.parse import parse_qs, urlparse

import pytest

from docvault.exceptions import AuthError

pytestmark = pytest.mark.asyncio


async def test_login_redirects_and_stores_verifier(client, identity):
    resp = await client.get("/auth/login/github")
    assert resp.status_code == 302
    assert resp.headers["location"].startswith("https://idp.test/auth/v1/authorize?provider=github")
    assert "docvault-session" in resp.cookies


async def test_login_rejects_odd_provider(client):
    resp = await client.get("/auth/login/git-hub")
    assert resp.status_code == 400


async def test_callback_exchanges_code_and_signs_in(client, identity):
    await client.get("/auth/login/github")
    resp = await client.get("/auth/callback", params={"code": "abc", "next": "/documents"})
    assert resp.status_code == 302
    assert resp.headers["location"] == "/documents"
    assert identity.exchanged == [("abc", "verifier-123")]

    # the session now carries the provider token
    identity.users["token-for-abc"] = identity.users["alice-token"]
    listed = await client.get("/api/documents")
    assert listed.status_code == 200


async def test_callback_without_code_or_error(client):
    resp = await client.get("/auth/callback")
    assert resp.status_code == 302
    assert resp.headers["location"] == "/"


async def test_callback_forwards_provider_error(client, identity):
    resp = await client.get("/auth/callback", params={"error": "access_denied", "next": "/home"})
    assert resp.status_code == 302
    location = urlparse(resp.headers["location"])
    assert location.path == "/home"
    assert parse_qs(location.query) == {"auth_error": ["access_denied"]}
    assert identity.exchanged == []


@pytest.mark.parametrize("next_url", ["https://evil.example/", "//evil.example", "javascript:alert(1)"])
async def test_callback_ignores_offsite_next(client, next_url):
    resp = await client.get("/auth/callback", params={"error": "x", "next": next_url})
    assert resp.headers["location"].startswith("/?auth_error=")


async def test_signout(client, identity, alice_headers):
    resp = await client.post("/auth/signout", headers=alice_headers)
    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    assert identity.signed_out == ["alice-token"]


async def test_signout_provider_failure(client, identity, alice_headers):
    identity.sign_out_error = AuthError("session_not_found")
    resp = await client.post("/auth/signout", headers=alice_headers)
    assert resp.status_code == 400
    assert resp.json() == {"error": "session_not_found"}
