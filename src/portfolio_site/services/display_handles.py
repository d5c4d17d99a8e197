"""Registry of short-lived display references to in-memory blobs."""

from dataclasses import dataclass, field
from uuid import uuid4

from portfolio_site.domain.photos import StoredBlob

REFERENCE_PREFIX = "blob:portfolio/"


@dataclass
class DisplayHandleRegistry:
    """Mints and revokes opaque references that resolve to a blob."""

    _blobs: dict[str, StoredBlob] = field(default_factory=dict)

    def mint(self, blob: StoredBlob) -> str:
        """Register blob and return a new reference to it."""
        ref = f"{REFERENCE_PREFIX}{uuid4()}"
        self._blobs[ref] = blob
        return ref

    def resolve(self, ref: str) -> StoredBlob | None:
        """Return the blob behind ref, or None once it has been revoked."""
        return self._blobs.get(ref)

    def revoke(self, ref: str) -> None:
        """Invalidate ref; revoking an unknown reference does nothing."""
        self._blobs.pop(ref, None)

    @property
    def live_count(self) -> int:
        return len(self._blobs)
