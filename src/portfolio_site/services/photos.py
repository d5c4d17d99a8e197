"""Profile photo state machine backed by the local blob store."""

import asyncio
import logging
from dataclasses import dataclass, field

from portfolio_site.domain.photos import PhotoStatus, PhotoView, StoredBlob
from portfolio_site.services.blob_store import BlobStore
from portfolio_site.services.display_handles import DisplayHandleRegistry
from portfolio_site.services.images import normalize_image

PROFILE_PHOTO_KEY = "profilePic"
LOAD_ERROR_MESSAGE = "Couldn't load saved photo."
SAVE_ERROR_MESSAGE = (
    "Failed to save image. Try another image (preferably under ~5MB)."
)

logger = logging.getLogger(__name__)


@dataclass
class ProfilePhotoController:
    """Owns the stored profile photo and the single live display reference.

    The controller never holds more than one live reference: a new one is
    minted only after the blob is persisted, and the previous one is revoked
    right after. Failures are turned into a user-facing message on the view
    and never raised to the caller.
    """

    store: BlobStore
    handles: DisplayHandleRegistry
    default_image: str
    key: str = PROFILE_PHOTO_KEY
    view: PhotoView = field(default_factory=lambda: PhotoView(PhotoStatus.DEFAULT))

    @property
    def source(self) -> str:
        """Image source the page should render right now."""
        return self.view.source(self.default_image)

    async def mount(self) -> PhotoView:
        """Load a previously saved photo, if any."""
        self.view = PhotoView(PhotoStatus.LOADING, display_ref=self.view.display_ref)
        try:
            blob = await self.store.get(self.key)
        except Exception:
            logger.exception("Failed to load saved photo", extra={"key": self.key})
            self._release()
            self.view = PhotoView(PhotoStatus.ERROR, error=LOAD_ERROR_MESSAGE)
            return self.view
        if blob is None:
            self._release()
            self.view = PhotoView(PhotoStatus.DEFAULT)
            return self.view
        self.view = PhotoView(PhotoStatus.LOADED, display_ref=self._replace(blob))
        return self.view

    async def upload(self, raw: bytes) -> PhotoView:
        """Normalize, persist and display a newly picked photo."""
        self.view = PhotoView(PhotoStatus.LOADING, display_ref=self.view.display_ref)
        try:
            normalized = await asyncio.to_thread(normalize_image, raw)
            blob = StoredBlob(data=normalized.data, media_type=normalized.media_type)
            await self.store.put(self.key, blob)
        except Exception:
            logger.exception("Failed to save photo", extra={"size": len(raw)})
            self.view = PhotoView(
                PhotoStatus.ERROR,
                display_ref=self.view.display_ref,
                error=SAVE_ERROR_MESSAGE,
            )
            return self.view
        self.view = PhotoView(PhotoStatus.LOADED, display_ref=self._replace(blob))
        return self.view

    async def remove(self) -> PhotoView:
        """Delete the saved photo and fall back to the default image."""
        try:
            await self.store.delete(self.key)
        except Exception:
            logger.exception("Failed to delete saved photo", extra={"key": self.key})
        self._release()
        self.view = PhotoView(PhotoStatus.DEFAULT)
        return self.view

    def close(self) -> None:
        """Release the live display reference on teardown."""
        self._release()
        self.view = PhotoView(PhotoStatus.DEFAULT)

    def _replace(self, blob: StoredBlob) -> str:
        ref = self.handles.mint(blob)
        self._release()
        return ref

    def _release(self) -> None:
        if self.view.display_ref is not None:
            self.handles.revoke(self.view.display_ref)
