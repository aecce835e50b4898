import wave
from array import array

import pytest

from daw_recorder.levels import Thumbnail, mean_abs_level, meter_width


def test_mean_abs_level_of_constant_magnitude():
    assert mean_abs_level([0.3, -0.3, 0.3, -0.3]) == pytest.approx(0.3)


def test_mean_abs_level_empty_is_silent():
    assert mean_abs_level([]) == 0.0


def test_mean_abs_level_accepts_generator():
    assert mean_abs_level(v for v in [-0.2, 0.2]) == pytest.approx(0.2)


def test_meter_width_clamped_to_width():
    assert meter_width(1.0, 300) == 300
    assert meter_width(0.5, 120) == 120


def test_meter_width_silent_is_empty():
    assert meter_width(0.0, 300) == 0


def test_meter_width_monotonic_and_bounded():
    widths = [meter_width(level / 1000, 400) for level in range(200)]
    assert widths == sorted(widths)
    assert all(0 <= w <= 400 for w in widths)


def test_thumbnail_tracks_total_samples():
    thumb = Thumbnail(2, 8000, samples_per_peak=16)
    thumb.add_block(0, [[0.1] * 100, [0.1] * 100])
    thumb.add_block(100, [[0.1] * 60, [0.1] * 60])
    assert thumb.total_samples == 160
    assert thumb.total_length == pytest.approx(160 / 8000)


def test_thumbnail_peaks_reflect_channel_values():
    thumb = Thumbnail(2, 1000, samples_per_peak=10)
    thumb.add_block(0, [[0.5] * 1000, [-0.25] * 1000])
    left = thumb.peaks(0, 0.0, thumb.total_length, 20)
    right = thumb.peaks(1, 0.0, thumb.total_length, 20)
    assert len(left) == 20
    assert all(p == (0.5, 0.5) for p in left)
    assert all(p == (-0.25, -0.25) for p in right)


def test_thumbnail_peaks_capture_min_and_max():
    thumb = Thumbnail(1, 100, samples_per_peak=4)
    thumb.add_block(0, [[0.9, -0.7, 0.1, 0.2] * 25])
    for lo, hi in thumb.peaks(0, 0.0, 1.0, 5):
        assert lo == pytest.approx(-0.7)
        assert hi == pytest.approx(0.9)


def test_thumbnail_peaks_beyond_data_are_silent():
    thumb = Thumbnail(1, 100, samples_per_peak=4)
    thumb.add_block(0, [[0.4] * 10])
    later = thumb.peaks(0, 5.0, 6.0, 3)
    assert later == [(0.0, 0.0)] * 3


def test_thumbnail_reset_clears_data():
    thumb = Thumbnail(2, 100)
    thumb.add_block(0, [[0.4] * 10, [0.4] * 10])
    thumb.reset(1, 48000)
    assert not thumb.total_samples
    assert thumb.channels == 1
    assert thumb.sample_rate == 48000


def test_thumbnail_errors():
    thumb = Thumbnail(2, 100)
    with pytest.raises(IndexError):
        thumb.peaks(2, 0.0, 1.0, 4)
    with pytest.raises(ValueError):
        thumb.peaks(0, 0.0, 1.0, 0)
    with pytest.raises(ValueError):
        thumb.peaks(0, 1.0, 0.5, 4)
    with pytest.raises(ValueError):
        thumb.add_block(-1, [[0.0]])
    with pytest.raises(ValueError):
        Thumbnail(0, 100)


def test_thumbnail_from_wav(tmp_path):
    path = tmp_path / "tone.wav"
    frames = array("h", [16384, -8192] * 500)
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(2)
        wav.setsampwidth(2)
        wav.setframerate(22050)
        wav.writeframes(frames.tobytes())
    thumb = Thumbnail.from_wav(path, samples_per_peak=50)
    assert thumb.channels == 2
    assert thumb.sample_rate == 22050
    assert thumb.total_samples == 500
    left = thumb.peaks(0, 0.0, thumb.total_length, 4)
    right = thumb.peaks(1, 0.0, thumb.total_length, 4)
    assert all(lo == pytest.approx(16384 / 32768) == hi for lo, hi in left)
    assert all(lo == pytest.approx(-8192 / 32768) == hi for lo, hi in right)