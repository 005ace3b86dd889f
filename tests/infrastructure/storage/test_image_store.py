"""Tests for the filesystem recipe image store."""

from pathlib import Path

import pytest

from src.core.exceptions import ImageStoreError
from src.infrastructure.storage.images import LocalImageStore, media_type_for


@pytest.fixture
def image_store(tmp_path: Path) -> LocalImageStore:
    return LocalImageStore(root=tmp_path / "images")


class TestLocalImageStore:
    async def test_save_and_load(self, image_store, tmp_path: Path):
        reference = await image_store.save("recipe-1-abc", b"\x89PNG", "image/png")

        assert reference == "recipe-1-abc.png"
        assert (tmp_path / "images" / reference).read_bytes() == b"\x89PNG"
        assert await image_store.load(reference) == b"\x89PNG"

    async def test_unknown_type_gets_bin_extension(self, image_store):
        reference = await image_store.save("recipe-1-abc", b"data", "application/x-foo")
        assert reference.endswith(".bin")

    async def test_load_missing(self, image_store):
        assert await image_store.load("nothing.png") is None

    async def test_delete_is_idempotent(self, image_store):
        reference = await image_store.save("recipe-1-abc", b"data", "image/jpeg")
        await image_store.delete(reference)
        await image_store.delete(reference)
        assert await image_store.load(reference) is None

    @pytest.mark.parametrize("reference", ["../escape.png", "a/b.png", ".hidden"])
    async def test_unsafe_reference(self, image_store, reference):
        with pytest.raises(ImageStoreError):
            await image_store.load(reference)


class TestMediaType:
    def test_known_extension(self):
        assert media_type_for("recipe-1.jpg") == "image/jpeg"

    def test_unknown_extension(self):
        assert media_type_for("recipe-1.bin") == "application/octet-stream"
