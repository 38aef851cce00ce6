"""Unit tests for UploadClient and content-type inference."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from talkitout.core.exceptions import UploadError
from talkitout.services.storage.base import BaseObjectStore
from talkitout.services.storage.uploader import (
    DEFAULT_CONTENT_TYPE,
    TEXT_CONTENT_TYPE,
    UploadClient,
    content_type_for,
)

LOCATOR = "https://cdn.example.com/recordings/a.wav"


@pytest.fixture
def store():
    store = AsyncMock(spec=BaseObjectStore)
    store.put.return_value = LOCATOR
    store.fetch.return_value = b"Dear diary"
    return store


@pytest.fixture
def uploader(store):
    return UploadClient(store)


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("a.m4a", "audio/mp4"),
        ("a.mp3", "audio/mpeg"),
        ("a.WAV", "audio/wav"),
        ("clip.mp4", "video/mp4"),
        ("clip.mov", "video/quicktime"),
        ("notes.txt", DEFAULT_CONTENT_TYPE),
        ("noext", DEFAULT_CONTENT_TYPE),
        ("dir.v2/file", DEFAULT_CONTENT_TYPE),
    ],
)
def test_content_type_for(path, expected):
    assert content_type_for(path) == expected


class TestUpload:
    async def test_local_file(self, uploader, store, tmp_path):
        recording = tmp_path / "take.wav"
        recording.write_bytes(b"RIFF....")

        locator = await uploader.upload(recording, "recordings/x.wav")

        assert locator == LOCATOR
        store.put.assert_awaited_once_with("recordings/x.wav", b"RIFF....", "audio/wav")

    async def test_content_type_from_local_name(self, uploader, store, tmp_path):
        recording = tmp_path / "take.m4a"
        recording.write_bytes(b"data")

        await uploader.upload(str(recording), "recordings/x.m4a")

        assert store.put.call_args.args[2] == "audio/mp4"

    async def test_raw_bytes_use_destination_extension(self, uploader, store):
        await uploader.upload(b"img", "avatars/a.mov")
        assert store.put.call_args.args[2] == "video/quicktime"

    async def test_explicit_content_type_wins(self, uploader, store):
        await uploader.upload(b"x", "a/b.wav", content_type="audio/x-custom")
        assert store.put.call_args.args[2] == "audio/x-custom"

    async def test_missing_file_raises_upload_error(self, uploader, store, tmp_path):
        with pytest.raises(UploadError) as exc_info:
            await uploader.upload(tmp_path / "missing.wav", "recordings/x.wav")

        assert isinstance(exc_info.value.cause, OSError)
        store.put.assert_not_awaited()

    async def test_store_failure_wraps_cause(self, uploader, store):
        store.put.side_effect = RuntimeError("HTTP 403")

        with pytest.raises(UploadError) as exc_info:
            await uploader.upload(b"x", "recordings/x.wav")

        assert isinstance(exc_info.value.cause, RuntimeError)
        assert exc_info.value.status_code == 502

    async def test_timeout_raises_upload_error(self, store):
        async def hang(*_args):
            await asyncio.sleep(1)

        store.put.side_effect = hang
        uploader = UploadClient(store, timeout=0.01)

        with pytest.raises(UploadError) as exc_info:
            await uploader.upload(b"x", "recordings/x.wav")
        assert isinstance(exc_info.value.cause, TimeoutError)

    async def test_single_attempt_by_default(self, uploader, store):
        store.put.side_effect = ConnectionError("offline")
        with pytest.raises(UploadError):
            await uploader.upload(b"x", "recordings/x.wav")
        assert store.put.await_count == 1

    async def test_retries_transient_errors_when_configured(self, store):
        store.put.side_effect = [ConnectionError("blip"), LOCATOR]
        uploader = UploadClient(store, max_attempts=2)

        assert await uploader.upload(b"x", "recordings/x.wav") == LOCATOR
        assert store.put.await_count == 2


class TestText:
    async def test_upload_text_is_utf8_plain_text(self, uploader, store):
        await uploader.upload_text("Café ☕", "text_entries/t.txt")

        path, data, ctype = store.put.call_args.args
        assert path == "text_entries/t.txt"
        assert data == "Café ☕".encode()
        assert ctype == TEXT_CONTENT_TYPE

    async def test_fetch_text_returns_literal_text(self, uploader, store):
        assert await uploader.fetch_text("just words") == "just words"
        store.fetch.assert_not_awaited()

    async def test_fetch_text_resolves_locator(self, uploader, store):
        assert await uploader.fetch_text("https://cdn.example.com/t.txt") == "Dear diary"
        store.fetch.assert_awaited_once_with("https://cdn.example.com/t.txt")

    async def test_fetch_failure_raises_upload_error(self, uploader, store):
        store.fetch.side_effect = ConnectionError("offline")
        with pytest.raises(UploadError):
            await uploader.fetch_text("file:///tmp/t.txt")
