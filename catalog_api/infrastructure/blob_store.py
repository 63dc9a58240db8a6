"""Blob storage for uploaded product images.

The catalog only needs one thing from a blob store: persist a byte
stream under a fresh name and hand back a reference that can later be
dereferenced (here, a path served by the static files mount).
"""

import secrets
import shutil
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import BinaryIO

import structlog
from starlette.concurrency import run_in_threadpool

from catalog_api.domain.exceptions import StorageError

logger = structlog.get_logger()


class BlobStore(ABC):
    """Abstract store for binary uploads."""

    @abstractmethod
    async def save(self, stream: BinaryIO, filename: str) -> str:
        """Store a byte stream.

        Args:
            stream: Readable binary stream positioned at the start.
            filename: Original client filename (only its extension is kept).

        Returns:
            Reference string for the stored blob.

        Raises:
            StorageError: If the blob could not be written.
        """


def make_blob_name(filename: str) -> str:
    """Build a unique blob name keeping the original extension.

    Args:
        filename: Original client filename.

    Returns:
        Random hex token followed by the lower-cased extension.
    """
    suffix = PurePosixPath(filename.replace("\\", "/")).suffix.lower()
    return f"{secrets.token_hex(16)}{suffix}"


class LocalBlobStore(BlobStore):
    """Blob store backed by a local directory.

    Files are written as ``<directory>/<token><ext>`` and referenced as
    ``<url_prefix>/<token><ext>``.
    """

    def __init__(self, directory: str | Path, url_prefix: str = "/uploads") -> None:
        """Initialize store.

        Args:
            directory: Target directory, created if missing.
            url_prefix: Public path prefix the directory is served under.
        """
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")
        self.directory.mkdir(parents=True, exist_ok=True)

    async def save(self, stream: BinaryIO, filename: str) -> str:
        name = make_blob_name(filename)
        target = self.directory / name

        try:
            await run_in_threadpool(self._write, stream, target)
        except OSError as e:
            logger.exception("Blob write failed", path=str(target))
            raise StorageError("image upload") from e

        logger.info("Blob stored", blob=name, original_filename=filename)
        return f"{self.url_prefix}/{name}"

    @staticmethod
    def _write(stream: BinaryIO, target: Path) -> None:
        with target.open("wb") as out:
            shutil.copyfileobj(stream, out)
