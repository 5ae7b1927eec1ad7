"""ObjectStoragePort protocol for reading uploaded documents."""

from __future__ import annotations

from typing import Protocol


class ObjectNotFound(Exception):
    """Raised by storage adapters when the requested key does not exist."""

    def __init__(self, bucket: str, key: str) -> None:
        super().__init__(f"object not found: {bucket}/{key}")
        self.bucket = bucket
        self.key = key


class ObjectStoragePort(Protocol):  # pragma: no cover - contract
    """Abstraction over the object storage holding uploaded documents.

    Implementations live in the infrastructure layer.
    """

    async def fetch(self, bucket: str, storage_key: str) -> bytes: ...
