import sys
import wave
from array import array
from datetime import datetime

import pytest

from daw_recorder.wavwriter import ThreadedWavWriter, recording_path


def _read(path):
    with wave.open(str(path), "rb") as wav:
        info = (wav.getnchannels(), wav.getsampwidth(), wav.getframerate(), wav.getnframes())
        raw = wav.readframes(wav.getnframes())
    return info, raw


def _shorts(raw):
    values = array("h", raw)
    if sys.byteorder == "big":
        values.byteswap()
    return list(values)


def test_recording_path_uses_timestamp(tmp_path):
    path = recording_path(tmp_path, datetime(2024, 1, 2, 3, 4, 5))
    assert path.parent == tmp_path
    assert path.name == "Recording_20240102_030405.wav"


def test_recording_path_defaults_to_now(tmp_path):
    path = recording_path(tmp_path)
    assert path.name.startswith("Recording_")
    assert path.suffix == ".wav"


def test_write_and_read_back(tmp_path):
    path = tmp_path / "out.wav"
    with ThreadedWavWriter(path, 44100, channels=2, bits=16) as writer:
        assert writer.write([[1.0, 0.0, -1.0], [0.0, 0.0, 0.0]])
        assert writer.write([[0.0], [1.0]])
    assert writer.closed
    assert writer.frames_written == 4
    (channels, width, rate, frames), raw = _read(path)
    assert (channels, width, rate, frames) == (2, 2, 44100, 4)
    assert _shorts(raw) == [32767, 0, 0, 0, -32767, 0, 0, 32767]


def test_values_are_clipped(tmp_path):
    path = tmp_path / "clip.wav"
    with ThreadedWavWriter(path, 8000, channels=1) as writer:
        writer.write([[2.0, 1.0, -5.0, -1.0]])
    _, raw = _read(path)
    left = _shorts(raw)
    assert left[0] == left[1]
    assert left[2] == left[3]


def test_24_bit_output(tmp_path):
    path = tmp_path / "deep.wav"
    with ThreadedWavWriter(path, 48000, channels=1, bits=24) as writer:
        writer.write([[0.5, -0.5]])
    (channels, width, rate, frames), raw = _read(path)
    assert (channels, width, rate, frames) == (1, 3, 48000, 2)
    first = int.from_bytes(raw[0:3], "little", signed=True)
    second = int.from_bytes(raw[3:6], "little", signed=True)
    assert first == -second
    assert first / (1 << 23) == pytest.approx(0.5, abs=1e-6)


def test_overflowing_block_is_dropped(tmp_path):
    path = tmp_path / "small.wav"
    with ThreadedWavWriter(path, 8000, channels=1, buffer_size=4) as writer:
        assert writer.write([[0.1] * 4]) is True
        assert writer.write([[0.1] * 8]) is False
    assert writer.frames_written == 4


def test_write_after_close_raises(tmp_path):
    writer = ThreadedWavWriter(tmp_path / "a.wav", 8000, channels=1)
    writer.close()
    writer.close()
    with pytest.raises(ValueError):
        writer.write([[0.0]])


def test_channel_mismatch_raises(tmp_path):
    with ThreadedWavWriter(tmp_path / "b.wav", 8000, channels=2) as writer:
        with pytest.raises(ValueError):
            writer.write([[0.0, 0.1]])
        with pytest.raises(ValueError):
            writer.write([[0.0, 0.1], [0.0]])
    assert writer.frames_written == 0


@pytest.mark.parametrize(
    "kwargs",
    [{"bits": 12}, {"channels": 0}, {"buffer_size": 0}],
)
def test_invalid_settings_raise(tmp_path, kwargs):
    with pytest.raises(ValueError):
        ThreadedWavWriter(tmp_path / "c.wav", 8000, **kwargs)


def test_existing_file_is_replaced(tmp_path):
    path = tmp_path / "old.wav"
    path.write_bytes(b"not audio at all" * 10)
    with ThreadedWavWriter(path, 8000, channels=1) as writer:
        writer.write([[0.25] * 3])
    (channels, _, _, frames), _ = _read(path)
    assert (channels, frames) == (1, 3)