"""MinIO/S3 adapter implementing ObjectStoragePort."""

from __future__ import annotations

import asyncio
import logging

import urllib3
from minio import Minio
from minio.error import S3Error

from insights_service.domain.ports.storage_port import ObjectNotFound, ObjectStoragePort

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"NoSuchKey", "NoSuchBucket", "NoSuchObject", "ResourceNotFound"}


def build_minio_client(
    endpoint: str,
    access_key: str,
    secret_key: str,
    *,
    secure: bool = True,
    region: str | None = None,
    timeout_seconds: float = 30.0,
) -> Minio:
    # No urllib3 retries: a failed fetch surfaces to the caller as-is
    http_client = urllib3.PoolManager(
        timeout=urllib3.Timeout(connect=min(timeout_seconds, 10.0), read=timeout_seconds),
        retries=False,
    )
    return Minio(
        endpoint,
        access_key=access_key,
        secret_key=secret_key,
        secure=secure,
        region=region,
        http_client=http_client,
    )


class MinioObjectStorage(ObjectStoragePort):
    """Reads whole objects from an S3-compatible bucket.

    The minio SDK is blocking, so each fetch runs in a worker thread.
    """

    def __init__(self, client: Minio) -> None:
        self._client = client

    def _fetch_sync(self, bucket: str, storage_key: str) -> bytes:
        try:
            response = self._client.get_object(bucket, storage_key)
        except S3Error as e:
            if e.code in _NOT_FOUND_CODES:
                raise ObjectNotFound(bucket, storage_key) from e
            logger.error(f"S3 error downloading {bucket}/{storage_key}: {e}")
            raise
        try:
            data = response.read()
        finally:
            response.close()
            response.release_conn()
        logger.info(f"Downloaded S3 object: key={storage_key}, size={len(data)} bytes")
        return data

    async def fetch(self, bucket: str, storage_key: str) -> bytes:
        return await asyncio.to_thread(self._fetch_sync, bucket, storage_key)
