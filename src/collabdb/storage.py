"""In-memory blob storage keyed by bucket and path."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from collabdb.query import QueryResult

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class Blob:
    """Binary content plus its declared MIME type."""

    content: bytes = b""
    content_type: str = DEFAULT_CONTENT_TYPE

    @property
    def size(self) -> int:
        return len(self.content)


class BlobStore:
    """Holds every uploaded blob under its (bucket, path) key."""

    def __init__(self) -> None:
        self._blobs: dict[tuple[str, str], Blob] = {}

    def put(self, bucket: str, path: str, blob: Blob) -> None:
        """Store a blob, replacing anything already at the same key."""
        self._blobs[(bucket, path)] = blob

    def get(self, bucket: str, path: str) -> Blob | None:
        return self._blobs.get((bucket, path))

    def keys(self, bucket: str | None = None) -> list[tuple[str, str]]:
        """List stored keys, optionally restricted to one bucket."""
        return [key for key in self._blobs if bucket is None or key[0] == bucket]

    def __len__(self) -> int:
        return len(self._blobs)


def _as_blob(file: Blob | bytes | bytearray, content_type: str | None) -> Blob:
    if isinstance(file, Blob):
        return Blob(bytes(file.content), content_type or file.content_type)
    if isinstance(file, (bytes, bytearray)):
        return Blob(bytes(file), content_type or DEFAULT_CONTENT_TYPE)
    raise TypeError(f"Cannot upload object of type {type(file).__name__}")


class BucketClient:
    """Upload and download interface for one bucket."""

    def __init__(self, bucket: str, blobs: BlobStore, *, latency: float) -> None:
        self.bucket = bucket
        self._blobs = blobs
        self._latency = latency

    async def upload(
        self,
        path: str,
        file: Blob | bytes | bytearray,
        *,
        content_type: str | None = None,
    ) -> QueryResult:
        """Store a copy of file at path. Data is {"path": path}."""
        await asyncio.sleep(self._latency)
        try:
            blob = _as_blob(file, content_type)
            self._blobs.put(self.bucket, path, blob)
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.warning("Upload to %s/%s failed: %s", self.bucket, path, message)
            return QueryResult.failure(message)
        logger.debug("Uploaded %d bytes to %s/%s", blob.size, self.bucket, path)
        return QueryResult.success({"path": path})

    async def download(self, path: str) -> QueryResult:
        """Fetch the blob at path. A path never uploaded yields an empty blob."""
        await asyncio.sleep(self._latency)
        try:
            blob = self._blobs.get(self.bucket, path)
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.warning("Download of %s/%s failed: %s", self.bucket, path, message)
            return QueryResult.failure(message)
        if blob is None:
            return QueryResult.success(Blob())
        return QueryResult.success(blob)


class StorageClient:
    """Entry point for bucket access, mirroring client.storage.from_(bucket)."""

    def __init__(self, blobs: BlobStore, *, latency: float) -> None:
        self.blobs = blobs
        self._latency = latency

    def from_(self, bucket: str) -> BucketClient:
        return BucketClient(bucket, self.blobs, latency=self._latency)
