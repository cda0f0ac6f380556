from pathlib import Path

import pytest

from fieldtech.services.media_store import MediaStore, classify


@pytest.mark.parametrize("content_type,expected", [
    ("image/jpeg", "photo"),
    ("image/png", "photo"),
    ("IMAGE/GIF", "photo"),
    ("video/mp4", "video"),
    ("video/quicktime", "video"),
])
def test_classify(content_type, expected):
    assert classify(content_type) == expected


async def test_save_writes_under_a_unique_name(tmp_path):
    store = MediaStore(tmp_path / "uploads", "uploads/")

    first = await store.save(b"one", "Front Door.JPG")
    second = await store.save(b"two", "Front Door.JPG")

    assert first.file_path != second.file_path
    assert first.file_url.startswith("/uploads/")
    assert first.file_url.endswith(".jpg")
    assert Path(first.file_path).read_bytes() == b"one"
    assert first.size == 3


async def test_save_without_extension(tmp_path):
    store = MediaStore(tmp_path)
    stored = await store.save(b"data", None)
    assert "." not in Path(stored.file_path).name


async def test_delete_removes_file_and_ignores_missing(tmp_path):
    store = MediaStore(tmp_path)
    stored = await store.save(b"data", "clip.mp4")

    await store.delete(stored.file_path)
    assert not Path(stored.file_path).exists()

    await store.delete(stored.file_path)
