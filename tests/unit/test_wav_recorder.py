"""Unit tests for WavRecorder."""

import wave

import pytest

from talkitout.core.exceptions import CaptureConfigurationError
from talkitout.services.audio.base import PermissionStatus
from talkitout.services.audio.recorder import WavRecorder


@pytest.fixture
def recorder():
    return WavRecorder(sample_rate=16000, permission=PermissionStatus.granted)


class TestPermission:
    async def test_undetermined_is_granted_on_request(self):
        recorder = WavRecorder()
        assert recorder.permission_status() is PermissionStatus.undetermined
        assert await recorder.request_permission() is True
        assert recorder.permission_status() is PermissionStatus.granted

    async def test_denied_stays_denied(self):
        recorder = WavRecorder(permission=PermissionStatus.denied)
        assert await recorder.request_permission() is False


class TestRecording:
    async def test_writes_wav(self, recorder, tmp_path, sample_pcm_bytes):
        destination = tmp_path / "nested" / "take.wav"
        await recorder.configure()
        await recorder.start(destination)
        assert recorder.is_recording

        recorder.feed(sample_pcm_bytes)
        path = await recorder.stop()

        assert path == destination
        assert not recorder.is_recording
        assert recorder.frames_written == 16000
        with wave.open(str(destination), "rb") as wf:
            assert wf.getnchannels() == 1
            assert wf.getsampwidth() == 2
            assert wf.getframerate() == 16000
            assert wf.getnframes() == 16000

    async def test_feed_forwards_to_listeners(self, recorder, tmp_path):
        received = []
        recorder.add_listener(received.append)
        await recorder.start(tmp_path / "a.wav")

        recorder.feed(b"\x01\x00\x02\x00")
        recorder.remove_listener(received.append)
        recorder.feed(b"\x03\x00")
        await recorder.stop()

        assert received == [b"\x01\x00\x02\x00"]

    async def test_feed_ignored_when_stopped(self, recorder):
        received = []
        recorder.add_listener(received.append)
        recorder.feed(b"\x01\x00")
        assert received == []
        assert recorder.frames_written == 0

    async def test_failing_listener_is_isolated(self, recorder, tmp_path):
        def broken(_pcm):
            raise RuntimeError("boom")

        recorder.add_listener(broken)
        await recorder.start(tmp_path / "a.wav")
        recorder.feed(b"\x01\x00")
        await recorder.stop()
        assert recorder.frames_written == 1

    async def test_stop_when_idle_returns_none(self, recorder):
        assert await recorder.stop() is None

    async def test_double_start_rejected(self, recorder, tmp_path):
        await recorder.start(tmp_path / "a.wav")
        with pytest.raises(CaptureConfigurationError):
            await recorder.start(tmp_path / "b.wav")
        await recorder.stop()

    async def test_unwritable_destination(self, recorder, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        with pytest.raises(CaptureConfigurationError):
            await recorder.start(blocker / "a.wav")

    async def test_invalid_sample_rate(self):
        with pytest.raises(CaptureConfigurationError):
            await WavRecorder(sample_rate=0).configure()
