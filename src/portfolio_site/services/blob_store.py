"""Local key/value blob persistence contract."""

from typing import Protocol

from portfolio_site.domain.photos import StoredBlob


class BlobStore(Protocol):
    """Asynchronous three-operation key/value store for binary objects."""

    async def put(self, key: str, blob: StoredBlob) -> None:
        """Insert or replace the blob stored under key."""

    async def get(self, key: str) -> StoredBlob | None:
        """Return the blob stored under key, or None when absent."""

    async def delete(self, key: str) -> None:
        """Remove the blob stored under key; absent keys are ignored."""
