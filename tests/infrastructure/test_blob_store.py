"""Tests for the local blob store."""

import io

import pytest

from catalog_api.domain.exceptions import StorageError
from catalog_api.infrastructure.blob_store import LocalBlobStore, make_blob_name


class TestMakeBlobName:
    """Tests for blob naming."""

    def test_keeps_extension(self):
        """The original extension survives, lower-cased."""
        name = make_blob_name("Foto Produto.JPG")
        assert name.endswith(".jpg")
        assert " " not in name

    def test_names_are_unique(self):
        """Two uploads with the same filename get different names."""
        assert make_blob_name("a.png") != make_blob_name("a.png")

    def test_no_extension(self):
        """Files without an extension get a bare token."""
        assert "." not in make_blob_name("imagem")

    def test_strips_directories(self):
        """Client-supplied paths never leak into the blob name."""
        name = make_blob_name("../../etc/passwd.png")
        assert "/" not in name
        assert ".." not in name
        assert name.endswith(".png")


class TestLocalBlobStore:
    """Tests for LocalBlobStore."""

    def test_creates_directory(self, tmp_path):
        """The target directory is created on init."""
        LocalBlobStore(tmp_path / "a" / "b")
        assert (tmp_path / "a" / "b").is_dir()

    @pytest.mark.asyncio
    async def test_save_writes_file(self, blob_store):
        """Saved bytes land in the directory under the returned name."""
        reference = await blob_store.save(io.BytesIO(b"hello"), "x.gif")

        name = reference.removeprefix("/uploads/")
        assert (blob_store.directory / name).read_bytes() == b"hello"

    @pytest.mark.asyncio
    async def test_custom_prefix(self, tmp_path):
        """References use the configured URL prefix."""
        store = LocalBlobStore(tmp_path, url_prefix="/static/img/")

        reference = await store.save(io.BytesIO(b"x"), "a.png")

        assert reference.startswith("/static/img/")
        assert "//" not in reference

    @pytest.mark.asyncio
    async def test_write_failure_raises_storage_error(self, blob_store):
        """IO errors surface as StorageError."""
        blob_store.directory.rmdir()

        with pytest.raises(StorageError) as exc_info:
            await blob_store.save(io.BytesIO(b"x"), "a.png")

        assert isinstance(exc_info.value.__cause__, OSError)
