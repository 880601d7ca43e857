"""Unit tests for easy_storage."""

import pytest
from pydantic import SecretStr

from docvault.storage.backends import LocalBackend, MemoryBackend
from docvault.storage.easy import easy_storage
from docvault.storage.settings import StorageSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("STORAGE_BACKEND", "STORAGE_S3_BUCKET", "RAILWAY_VOLUME_MOUNT_PATH"):
        monkeypatch.delenv(var, raising=False)


@pytest.mark.storage
class TestEasyStorage:
    def test_memory(self):
        backend = easy_storage(backend="memory")
        assert isinstance(backend, MemoryBackend)
        assert backend.signer is not None

    def test_local_from_override(self, tmp_path):
        backend = easy_storage(backend="local", base_path=str(tmp_path))
        assert isinstance(backend, LocalBackend)
        assert backend.base_path == tmp_path

    def test_settings_backend(self):
        backend = easy_storage(settings=StorageSettings(backend="memory"))
        assert isinstance(backend, MemoryBackend)

    def test_default_is_local(self):
        assert isinstance(easy_storage(settings=StorageSettings()), LocalBackend)

    def test_railway_volume(self, monkeypatch, tmp_path):
        monkeypatch.setenv("RAILWAY_VOLUME_MOUNT_PATH", str(tmp_path))
        backend = easy_storage(settings=StorageSettings())
        assert isinstance(backend, LocalBackend)
        assert backend.base_path == tmp_path

    def test_s3_from_settings(self):
        from docvault.storage.backends.s3 import S3Backend

        settings = StorageSettings(
            s3_bucket="docs",
            s3_region="eu-west-1",
            s3_access_key="AK",
            s3_secret_key=SecretStr("SK"),
        )
        backend = easy_storage(settings=settings)
        assert isinstance(backend, S3Backend)
        assert backend.bucket == "docs"
        assert backend.region == "eu-west-1"

    def test_s3_requires_bucket(self):
        with pytest.raises(ValueError, match="STORAGE_S3_BUCKET"):
            easy_storage(backend="s3", settings=StorageSettings())

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown storage backend"):
            easy_storage(backend="ftp")


@pytest.mark.security
class TestSigningSecret:
    def test_dev_secret_refused_in_prod(self, monkeypatch):
        monkeypatch.setattr("docvault.storage.easy.IS_PROD", True)
        with pytest.raises(RuntimeError, match="STORAGE_SIGNING_SECRET"):
            easy_storage(backend="memory")

    def test_real_secret_accepted_in_prod(self, monkeypatch):
        monkeypatch.setattr("docvault.storage.easy.IS_PROD", True)
        backend = easy_storage(settings=StorageSettings(backend="memory", signing_secret=SecretStr("s3cr3t")))
        assert isinstance(backend, MemoryBackend)

    def test_dev_secret_warns_outside_prod(self, caplog):
        with caplog.at_level("WARNING", logger="docvault.storage.easy"):
            easy_storage(backend="memory")
        assert "development signing secret" in caplog.text

    def test_s3_ignores_signing_secret(self, monkeypatch):
        monkeypatch.setattr("docvault.storage.easy.IS_PROD", True)
        backend = easy_storage(backend="s3", bucket="docs")
        assert backend.name == "s3"
