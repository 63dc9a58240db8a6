"""Image acquisition strategies.

A deployment picks exactly one way of attaching images to products:

- ``ReferenceImageSource``: clients send an image URL, stored verbatim.
- ``UploadImageSource``: clients upload a file, stored in a blob store;
  the blob reference is what gets saved on the product.
"""

from abc import ABC, abstractmethod

from catalog_api.catalog.fields import ImageUpload, has_text
from catalog_api.infrastructure.blob_store import BlobStore, LocalBlobStore
from catalog_api.infrastructure.config import ImageMode, Settings


class ImageSource(ABC):
    """Turns the image part of a request into a stored reference."""

    mode: ImageMode

    @abstractmethod
    async def acquire(
        self,
        reference: str | None = None,
        upload: ImageUpload | None = None,
    ) -> str | None:
        """Resolve the image for a create or update.

        Args:
            reference: Image reference sent by the client, if any.
            upload: Uploaded file, if any.

        Returns:
            Reference to store, or None when no image was supplied.
        """


class ReferenceImageSource(ImageSource):
    """Pass-through strategy: the client-supplied reference is the image."""

    mode = ImageMode.URL

    async def acquire(
        self,
        reference: str | None = None,
        upload: ImageUpload | None = None,
    ) -> str | None:
        return reference if has_text(reference) else None


class UploadImageSource(ImageSource):
    """Upload strategy: files go to the blob store, references are ignored."""

    mode = ImageMode.UPLOAD

    def __init__(self, blob_store: BlobStore) -> None:
        """Initialize strategy.

        Args:
            blob_store: Where uploaded files are written.
        """
        self.blob_store = blob_store

    async def acquire(
        self,
        reference: str | None = None,
        upload: ImageUpload | None = None,
    ) -> str | None:
        if upload is None or not upload.filename:
            return None
        return await self.blob_store.save(upload.stream, upload.filename)


def create_image_source(settings: Settings) -> ImageSource:
    """Build the image source configured for this deployment.

    Args:
        settings: Application settings.

    Returns:
        Image source matching ``settings.image_mode``.
    """
    if settings.image_mode == ImageMode.UPLOAD:
        return UploadImageSource(
            LocalBlobStore(settings.upload_dir, settings.upload_url_prefix)
        )
    return ReferenceImageSource()
