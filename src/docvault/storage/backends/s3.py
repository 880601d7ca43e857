from __future__ import annotations

from typing import Any, Iterable, Optional

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from ..base import (
    FileNotFoundError,
    PermissionDeniedError,
    StorageBackend,
    StorageBackendError,
    validate_key,
)

# S3 DeleteObjects accepts at most 1000 keys per call.
DELETE_BATCH_SIZE = 1000
_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}
_DENIED_CODES = {"403", "AccessDenied"}


def _translate(exc: Exception, key: str) -> StorageBackendError:
    if isinstance(exc, ClientError):
        code = str(exc.response.get("Error", {}).get("Code", ""))
        if code in _MISSING_CODES:
            return FileNotFoundError(f"File not found: {key}")
        if code in _DENIED_CODES:
            return PermissionDeniedError(f"Access denied for {key}: {code}")
    return StorageBackendError(f"S3 operation failed for {key}: {exc}")


class S3Backend(StorageBackend):
    """S3 (or S3-compatible: MinIO, R2, Supabase storage) bucket backend."""

    name = "s3"

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint: Optional[str] = None,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
    ):
        self.bucket = bucket
        self.region = region
        self.endpoint = endpoint
        self._session = aioboto3.Session(
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
        )

    def _client(self):
        return self._session.client("s3", endpoint_url=self.endpoint, region_name=self.region)

    async def put(self, key, data, content_type, metadata=None) -> str:
        validate_key(key)
        extra = {"Metadata": {k: str(v) for k, v in (metadata or {}).items()}}
        try:
            async with self._client() as s3:
                await s3.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=content_type, **extra)
        except (ClientError, BotoCoreError) as exc:
            raise _translate(exc, key) from exc
        return f"s3://{self.bucket}/{key}"

    async def get(self, key: str) -> bytes:
        validate_key(key)
        try:
            async with self._client() as s3:
                resp = await s3.get_object(Bucket=self.bucket, Key=key)
                async with resp["Body"] as stream:
                    return await stream.read()
        except (ClientError, BotoCoreError) as exc:
            raise _translate(exc, key) from exc

    async def delete(self, key: str) -> bool:
        if not await self.exists(key):
            return False
        try:
            async with self._client() as s3:
                await s3.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise _translate(exc, key) from exc
        return True

    async def delete_many(self, keys: Iterable[str]) -> int:
        keys = [validate_key(k) for k in keys]
        removed = 0
        try:
            async with self._client() as s3:
                for start in range(0, len(keys), DELETE_BATCH_SIZE):
                    batch = keys[start:start + DELETE_BATCH_SIZE]
                    resp = await s3.delete_objects(
                        Bucket=self.bucket,
                        Delete={"Objects": [{"Key": k} for k in batch], "Quiet": False},
                    )
                    errors = resp.get("Errors") or []
                    if errors:
                        first = errors[0]
                        raise StorageBackendError(
                            f"S3 refused to delete {len(errors)} object(s); "
                            f"first: {first.get('Key')} ({first.get('Code')})"
                        )
                    removed += len(resp.get("Deleted") or [])
        except (ClientError, BotoCoreError) as exc:
            raise _translate(exc, ",".join(keys[:3])) from exc
        return removed

    async def exists(self, key: str) -> bool:
        validate_key(key)
        try:
            async with self._client() as s3:
                await s3.head_object(Bucket=self.bucket, Key=key)
            return True
        except ClientError as exc:
            err = _translate(exc, key)
            if isinstance(err, FileNotFoundError):
                return False
            raise err from exc
        except BotoCoreError as exc:
            raise _translate(exc, key) from exc

    async def get_url(self, key: str, expires_in: int = 3600, download: bool = False) -> str:
        if not await self.exists(key):
            raise FileNotFoundError(f"File not found: {key}")
        params: dict[str, Any] = {"Bucket": self.bucket, "Key": key}
        if download:
            filename = key.rsplit("/", 1)[-1]
            params["ResponseContentDisposition"] = f'attachment; filename="{filename}"'
        try:
            async with self._client() as s3:
                return await s3.generate_presigned_url("get_object", Params=params, ExpiresIn=expires_in)
        except (ClientError, BotoCoreError) as exc:
            raise _translate(exc, key) from exc

    async def list_keys(self, prefix: str = "", limit: Optional[int] = None) -> list[str]:
        keys: list[str] = []
        try:
            async with self._client() as s3:
                paginator = s3.get_paginator("list_objects_v2")
                async for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                    for obj in page.get("Contents", []) or []:
                        keys.append(obj["Key"])
                        if limit and len(keys) >= limit:
                            return keys
        except (ClientError, BotoCoreError) as exc:
            raise _translate(exc, prefix or "*") from exc
        return keys

    async def get_metadata(self, key: str) -> dict[str, Any]:
        validate_key(key)
        try:
            async with self._client() as s3:
                head = await s3.head_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise _translate(exc, key) from exc
        return {
            **(head.get("Metadata") or {}),
            "size": head.get("ContentLength", 0),
            "content_type": head.get("ContentType"),
            "created_at": head["LastModified"].isoformat() if head.get("LastModified") else None,
        }
