"""
Root conftest.py for docvault tests.

Provides:
1. Marker registration and path-based auto-marking
2. An in-memory SQLite engine with the schema created
3. A fake identity provider that maps tokens to principals
4. A FastAPI app wired with those fakes and an httpx client over ASGITransport
"""

from __future__ import annotations

import os
from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr

os.environ.setdefault("APP_ENV", "test")

from docvault.api.fastapi import create_app  # noqa: E402
from docvault.app.settings import AppSettings  # noqa: E402
from docvault.auth import IdentitySettings, Principal  # noqa: E402
from docvault.db import DBEngine, DBSettings  # noqa: E402
from docvault.documents import DocumentSettings  # noqa: E402
from docvault.documents.models import Document  # noqa: E402
from docvault.exceptions import AppError  # noqa: E402
from docvault.storage import MemoryBackend, URLSigner  # noqa: E402

FILES_BASE_URL = "http://testserver/api/files"


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    for name, desc in [
        ("storage", "Storage backend tests"),
        ("security", "Signing, ownership and auth tests"),
        ("documents", "Document service and API tests"),
    ]:
        config.addinivalue_line("markers", f"{name}: {desc}")


def pytest_collection_modifyitems(config, items):
    """Tag tests under tests/auth/ with `security` so `-m security` selects them."""
    for item in items:
        norm = str(item.fspath).replace("\\", "/")
        if "/tests/auth/" in norm:
            item.add_marker(pytest.mark.security)


# =============================================================================
# IDENTITY FAKES
# =============================================================================


class FakeIdentityClient:
    """Stands in for IdentityClient; tokens are looked up in a dict."""

    def __init__(self, users: Optional[dict[str, Principal]] = None):
        self.users = dict(users or {})
        self.signed_out: list[str] = []
        self.sign_out_error: Optional[AppError] = None
        self.exchanged: list[tuple[str, str]] = []

    def authorize_url(self, provider: str, redirect_to: str) -> tuple[str, str]:
        return f"https://idp.test/auth/v1/authorize?provider={provider}", "verifier-123"

    async def exchange_code(self, code: str, code_verifier: str):
        from docvault.auth import TokenSet

        self.exchanged.append((code, code_verifier))
        return TokenSet(access_token=f"token-for-{code}", refresh_token="refresh", principal=None)

    async def get_user(self, access_token: str) -> Optional[Principal]:
        return self.users.get(access_token)

    async def sign_out(self, access_token: str) -> None:
        if self.sign_out_error is not None:
            raise self.sign_out_error
        self.signed_out.append(access_token)

    async def aclose(self) -> None:
        pass


ALICE = Principal(id="user-alice", email="alice@example.com")
BOB = Principal(id="user-bob", email="bob@example.com")


@pytest.fixture
def identity() -> FakeIdentityClient:
    return FakeIdentityClient({"alice-token": ALICE, "bob-token": BOB})


@pytest.fixture
def identity_settings() -> IdentitySettings:
    return IdentitySettings(url="https://idp.test", public_key=SecretStr("anon-key"))


# =============================================================================
# DATABASE / STORAGE FIXTURES
# =============================================================================


@pytest_asyncio.fixture
async def db_engine():
    engine = DBEngine(DBSettings(database_url="sqlite+aiosqlite:///:memory:"))
    await engine.create_all()
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    async with db_engine.session() as session:
        yield session


@pytest.fixture
def storage() -> MemoryBackend:
    return MemoryBackend(signer=URLSigner("test-signing-secret", FILES_BASE_URL))


@pytest.fixture
def document_settings() -> DocumentSettings:
    return DocumentSettings(max_upload_bytes=1024, bulk_delete_max=5)


@pytest.fixture
def pdf_with_text():
    """Build a one-page PDF whose content stream draws ``text`` in Helvetica."""

    def _build(text: str) -> bytes:
        content = b"BT /F1 18 Tf 20 60 Td (" + text.encode("latin-1") + b") Tj ET"
        objects = [
            b"<< /Type /Catalog /Pages 2 0 R >>",
            b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
            b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 300 144]"
            b" /Resources << /Font << /F1 4 0 R >> >> /Contents 5 0 R >>",
            b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
            b"<< /Length %d >>\nstream\n" % len(content) + content + b"\nendstream",
        ]
        out = bytearray(b"%PDF-1.4\n")
        offsets = []
        for num, body in enumerate(objects, start=1):
            offsets.append(len(out))
            out += b"%d 0 obj\n" % num + body + b"\nendobj\n"
        xref_at = len(out)
        out += b"xref\n0 %d\n" % (len(objects) + 1)
        out += b"0000000000 65535 f \n"
        for offset in offsets:
            out += b"%010d 00000 n \n" % offset
        out += b"trailer\n<< /Size %d /Root 1 0 R >>\n" % (len(objects) + 1)
        out += b"startxref\n%d\n%%%%EOF\n" % xref_at
        return bytes(out)

    return _build


@pytest.fixture
def make_document(db_engine, storage):
    """Insert a row (and optionally its object) directly, bypassing the upload path."""

    async def _make(
        *,
        owner: str,
        title: str = "Doc",
        path: str = "uploads/1-a-doc.txt",
        content: Optional[bytes] = b"abc",
        content_type: str = "text/plain",
    ) -> Document:
        if content is not None:
            await storage.put(path, content, content_type)
        doc = Document(
            title=title,
            storage_path=path,
            file_size_bytes=len(content or b""),
            created_by=owner,
        )
        async with db_engine.session() as session:
            session.add(doc)
            await session.commit()
        return doc

    return _make


# =============================================================================
# API FIXTURES
# =============================================================================


@pytest.fixture
def app(db_engine, storage, identity, identity_settings, document_settings):
    return create_app(
        app_settings=AppSettings(cors_origins="http://localhost:3000", public_base_url="http://testserver"),
        identity_settings=identity_settings,
        document_settings=document_settings,
        db_engine=db_engine,
        storage=storage,
        identity=identity,
        configure_logging=False,
    )


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as c:
        yield c


@pytest.fixture
def alice_headers() -> dict[str, str]:
    return {"Authorization": "Bearer alice-token"}


@pytest.fixture
def bob_headers() -> dict[str, str]:
    return {"Authorization": "Bearer bob-token"}
