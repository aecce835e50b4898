"""Input level metering and waveform overview data for recordings."""

from __future__ import annotations

import math
import struct
import wave
from collections.abc import Iterable, Sequence
from os import PathLike

METER_GAIN = 10.0
"""Scale applied to the mean level so quiet input still shows on the meter."""


def mean_abs_level(samples: Iterable[float]) -> float:
    """Return the mean absolute value of ``samples``, or 0.0 when there are none."""
    values = list(samples)
    if not values:
        return 0.0
    return math.fsum(abs(value) for value in values) / len(values)


def meter_width(level: float, width: int) -> int:
    """Return the pixel width of the level bar for a meter ``width`` pixels wide."""
    bar = int(level * width * METER_GAIN)
    return max(0, min(bar, width))


def _decode_pcm(raw: bytes, width: int) -> list[float]:
    if width == 1:
        return [(byte - 128) / 128.0 for byte in raw]
    scale = float(1 << (8 * width - 1))
    return [
        int.from_bytes(chunk, "little", signed=True) / scale
        for (chunk,) in struct.iter_unpack(f"{width}s", raw)
    ]


class Thumbnail:
    """Reduced min/max overview of a multi-channel recording, used to draw waveforms."""

    def __init__(
        self,
        channels: int = 2,
        sample_rate: float = 44100.0,
        samples_per_peak: int = 2048,
    ) -> None:
        if samples_per_peak <= 0:
            raise ValueError("samples_per_peak must be positive")
        self.samples_per_peak = samples_per_peak
        self.reset(channels, sample_rate)

    def reset(self, channels: int, sample_rate: float) -> None:
        """Discard all data and prepare for a new recording."""
        if channels <= 0:
            raise ValueError("channels must be positive")
        if sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        self.channels = channels
        self.sample_rate = float(sample_rate)
        self._mins: list[list[float]] = [[] for _ in range(channels)]
        self._maxs: list[list[float]] = [[] for _ in range(channels)]
        self.total_samples = 0

    @property
    def total_length(self) -> float:
        """Length of the data held, in seconds."""
        return self.total_samples / self.sample_rate

    def add_block(self, start_sample: int, block: Sequence[Sequence[float]]) -> None:
        """Add one block of per-channel samples beginning at ``start_sample``."""
        if start_sample < 0:
            raise ValueError("start_sample must not be negative")
        spp = self.samples_per_peak
        for data, mins, maxs in zip(block, self._mins, self._maxs):
            for offset, value in enumerate(data):
                bucket = (start_sample + offset) // spp
                if bucket >= len(mins):
                    missing = bucket + 1 - len(mins)
                    mins.extend([math.inf] * missing)
                    maxs.extend([-math.inf] * missing)
                if value < mins[bucket]:
                    mins[bucket] = value
                if value > maxs[bucket]:
                    maxs[bucket] = value
            self.total_samples = max(self.total_samples, start_sample + len(data))

    def peaks(
        self,
        channel: int,
        start_seconds: float,
        end_seconds: float,
        columns: int,
    ) -> list[tuple[float, float]]:
        """Return ``columns`` (min, max) pairs spanning the given time range."""
        if not 0 <= channel < self.channels:
            raise IndexError(f"channel {channel} out of range")
        if columns <= 0:
            raise ValueError("columns must be positive")
        if end_seconds < start_seconds:
            raise ValueError("end_seconds must not precede start_seconds")
        mins = self._mins[channel]
        maxs = self._maxs[channel]
        spp = self.samples_per_peak
        first = start_seconds * self.sample_rate
        span = (end_seconds - start_seconds) * self.sample_rate
        result = []
        for column in range(columns):
            lo_sample = first + span * column / columns
            hi_sample = first + span * (column + 1) / columns
            lo_bucket = max(0, int(lo_sample // spp))
            hi_bucket = max(lo_bucket + 1, math.ceil(hi_sample / spp))
            lo = min(mins[lo_bucket:hi_bucket], default=math.inf)
            hi = max(maxs[lo_bucket:hi_bucket], default=-math.inf)
            result.append((lo, hi) if lo <= hi else (0.0, 0.0))
        return result

    @classmethod
    def from_wav(cls, path: str | PathLike[str], samples_per_peak: int = 2048) -> Thumbnail:
        """Build a thumbnail from a PCM WAV file on disk."""
        with wave.open(str(path), "rb") as wav:
            channels = wav.getnchannels()
            width = wav.getsampwidth()
            rate = wav.getframerate()
            raw = wav.readframes(wav.getnframes())
        samples = _decode_pcm(raw, width)
        thumbnail = cls(channels, rate, samples_per_peak)
        thumbnail.add_block(0, [samples[c::channels] for c in range(channels)])
        return thumbnail