from __future__ import annotations

import logging
import os
from typing import Any, Optional

from docvault.app import IS_PROD

from .base import StorageBackend
from .settings import DEV_SIGNING_SECRET, StorageSettings
from .signing import URLSigner

logger = logging.getLogger(__name__)


def easy_storage(backend: Optional[str] = None, settings: Optional[StorageSettings] = None, **overrides: Any) -> StorageBackend:
    """Build a storage backend from arguments or ``STORAGE_*`` settings.

    Resolution order when ``backend`` is not given: ``STORAGE_BACKEND``, then S3
    if a bucket is configured, then a Railway volume, then local disk.
    """
    settings = settings or StorageSettings()
    kind = backend or settings.backend
    if kind is None:
        if overrides.get("bucket") or settings.s3_bucket:
            kind = "s3"
        elif os.getenv("RAILWAY_VOLUME_MOUNT_PATH"):
            kind = "local"
            overrides.setdefault("base_path", os.environ["RAILWAY_VOLUME_MOUNT_PATH"])
        else:
            kind = "local"

    signing_secret = overrides.get("signing_secret") or settings.signing_secret.get_secret_value()
    base_url = overrides.get("base_url") or settings.base_url
    # s3 presigns with its own credentials; memory/local rely on this secret
    if kind in ("memory", "local") and signing_secret == DEV_SIGNING_SECRET:
        if IS_PROD:
            raise RuntimeError("STORAGE_SIGNING_SECRET must be set in production")
        logger.warning("Using the development signing secret for %s storage", kind)

    if kind == "memory":
        from .backends.memory import MemoryBackend

        storage: StorageBackend = MemoryBackend(
            max_size=overrides.get("max_size"),
            signer=URLSigner(signing_secret, base_url),
        )
    elif kind == "local":
        from .backends.local import LocalBackend

        storage = LocalBackend(
            base_path=overrides.get("base_path") or settings.base_path,
            base_url=base_url,
            signing_secret=signing_secret,
        )
    elif kind == "s3":
        from .backends.s3 import S3Backend

        bucket = overrides.get("bucket") or settings.s3_bucket
        if not bucket:
            raise ValueError("STORAGE_S3_BUCKET must be set for the s3 backend")
        secret = overrides.get("secret_key") or (
            settings.s3_secret_key.get_secret_value() if settings.s3_secret_key else None
        )
        storage = S3Backend(
            bucket=bucket,
            region=overrides.get("region") or settings.s3_region,
            endpoint=overrides.get("endpoint") or settings.s3_endpoint,
            access_key=overrides.get("access_key") or settings.s3_access_key,
            secret_key=secret,
        )
    else:
        raise ValueError(f"Unknown storage backend: {kind!r} (expected memory, local or s3)")

    logger.info("Storage backend selected: %s", storage.name)
    return storage
