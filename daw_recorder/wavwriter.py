"""WAV file output that writes on a background thread."""

from __future__ import annotations

import queue
import threading
import wave
from collections.abc import Sequence
from datetime import datetime
from os import PathLike
from pathlib import Path

SUPPORTED_BITS = (8, 16, 24, 32)


def recording_path(directory: str | PathLike[str], now: datetime | None = None) -> Path:
    """Return the timestamped file path for a new recording in ``directory``."""
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return Path(directory) / f"Recording_{stamp}.wav"


def _clip(value: float) -> float:
    return max(-1.0, min(1.0, float(value)))


def _encode(channels: Sequence[Sequence[float]], bits: int) -> bytes:
    interleaved = (_clip(value) for frame in zip(*channels) for value in frame)
    if bits == 8:
        return bytes(round(value * 127) + 128 for value in interleaved)
    width = bits // 8
    peak = (1 << (bits - 1)) - 1
    return b"".join(
        round(value * peak).to_bytes(width, "little", signed=True) for value in interleaved
    )


class ThreadedWavWriter:
    """PCM WAV writer whose disk writes happen off the caller's thread.

    ``write`` never blocks on disk: blocks are queued, and a block that would
    take the queue past ``buffer_size`` frames is dropped and ``False`` returned.
    """

    def __init__(
        self,
        path: str | PathLike[str],
        sample_rate: float,
        channels: int = 2,
        bits: int = 16,
        buffer_size: int = 32768,
    ) -> None:
        if bits not in SUPPORTED_BITS:
            raise ValueError(f"unsupported bit depth {bits}")
        if channels <= 0:
            raise ValueError("channels must be positive")
        if sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        if buffer_size <= 0:
            raise ValueError("buffer_size must be positive")
        self.path = Path(path)
        self.sample_rate = sample_rate
        self.channels = channels
        self.bits = bits
        self.buffer_size = buffer_size
        self.frames_written = 0
        self._wav = wave.open(str(self.path), "wb")
        self._wav.setnchannels(channels)
        self._wav.setsampwidth(bits // 8)
        self._wav.setframerate(int(round(sample_rate)))
        self._queue: queue.Queue[list[list[float]] | None] = queue.Queue()
        self._lock = threading.Lock()
        self._pending = 0
        self._error: Exception | None = None
        self._closed = False
        self._thread = threading.Thread(
            target=self._run, name="Audio Recorder Thread", daemon=True
        )
        self._thread.start()

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, block: Sequence[Sequence[float]]) -> bool:
        """Queue one block of per-channel samples; return False if it was dropped."""
        if self._closed:
            raise ValueError("write to a closed writer")
        channels = [list(data) for data in block]
        if len(channels) != self.channels:
            raise ValueError(f"expected {self.channels} channels, got {len(channels)}")
        frames = len(channels[0])
        if any(len(data) != frames for data in channels):
            raise ValueError("channels in a block must have equal length")
        with self._lock:
            if self._pending + frames > self.buffer_size:
                return False
            self._pending += frames
        self._queue.put(channels)
        return True

    def _run(self) -> None:
        while (channels := self._queue.get()) is not None:
            frames = len(channels[0])
            try:
                if self._error is None:
                    self._wav.writeframes(_encode(channels, self.bits))
                    self.frames_written += frames
            except (OSError, wave.Error) as exc:
                self._error = exc
            finally:
                with self._lock:
                    self._pending -= frames

    def close(self) -> None:
        """Flush everything queued, then close the file."""
        if self._closed:
            return
        self._closed = True
        self._queue.put(None)
        self._thread.join()
        self._wav.close()
        if self._error is not None:
            raise self._error

    def __enter__(self) -> ThreadedWavWriter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()