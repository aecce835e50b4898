"""Multi-track recording session: several takes, each with its own waveform."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from os import PathLike
from pathlib import Path

from daw_recorder.levels import Thumbnail, mean_abs_level
from daw_recorder.recorder import RecorderError
from daw_recorder.wavwriter import ThreadedWavWriter, recording_path

CHANNELS = 2
BITS = 16
WRITER_BUFFER = 32768
MAX_RECORDINGS = 6

TRACK_WIDTH = 1100
TRACK_HEIGHT = 120
TRACK_SPACING = 10
CONTAINER_MIN_HEIGHT = 600


class MaxRecordingsError(RecorderError):
    """Raised when a new take would exceed the session's recording limit."""


@dataclass
class Track:
    """One recorded take: its WAV file and its waveform overview."""

    file: Path
    thumbnail: Thumbnail


def track_layout(count: int) -> tuple[list[tuple[int, int, int, int]], int]:
    """Return the (x, y, width, height) of each track and the container height."""
    if count < 0:
        raise ValueError("count must not be negative")
    step = TRACK_HEIGHT + TRACK_SPACING
    rects = [(0, TRACK_SPACING + step * i, TRACK_WIDTH, TRACK_HEIGHT) for i in range(count)]
    height = max(CONTAINER_MIN_HEIGHT, count * step + TRACK_SPACING)
    return rects, height


class RecordingSession:
    """Holds up to ``max_recordings`` takes written into ``directory``."""

    def __init__(
        self,
        directory: str | PathLike[str],
        sample_rate: float = 44100.0,
        max_recordings: int = MAX_RECORDINGS,
    ) -> None:
        if sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        if max_recordings <= 0:
            raise ValueError("max_recordings must be positive")
        self.directory = Path(directory)
        self.sample_rate = float(sample_rate)
        self.max_recordings = max_recordings
        self.tracks: list[Track] = []
        self.is_recording = False
        self.current_level = 0.0
        self.next_sample = 0
        self.playhead_position = 0.0
        self.current_index: int | None = None
        self._writer: ThreadedWavWriter | None = None
        self._lock = threading.Lock()

    def prepare(self, sample_rate: float) -> None:
        """Set the sample rate used for the next take."""
        if sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        self.sample_rate = float(sample_rate)

    def start(self, now: datetime | None = None) -> Path:
        """Begin a new take as a new track and return its file path."""
        if len(self.tracks) >= self.max_recordings:
            raise MaxRecordingsError(
                f"Maximum {self.max_recordings} recordings allowed! "
                "Please delete some recordings first."
            )
        if self.is_recording and self.current_index is not None:
            return self.tracks[self.current_index].file
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path = recording_path(self.directory, now)
            if path.exists():
                path.unlink()
            writer = ThreadedWavWriter(path, self.sample_rate, CHANNELS, BITS, WRITER_BUFFER)
        except OSError as exc:
            raise RecorderError(f"cannot open recording file: {exc}") from exc

        self.tracks.append(Track(path, Thumbnail(CHANNELS, self.sample_rate)))
        self.current_index = len(self.tracks) - 1
        self.next_sample = 0
        self.playhead_position = 0.0
        with self._lock:
            self._writer = writer
        self.is_recording = True
        return path

    def stop(self) -> Path | None:
        """Finish the running take, reload its waveform from disk, return its file."""
        if not self.is_recording:
            return None
        self.is_recording = False
        with self._lock:
            writer, self._writer = self._writer, None
        if writer is not None:
            try:
                writer.close()
            except OSError as exc:
                raise RecorderError(f"failed writing recording: {exc}") from exc
        if self.current_index is None:
            return None
        track = self.tracks[self.current_index]
        if track.file.exists():
            track.thumbnail = Thumbnail.from_wav(track.file, track.thumbnail.samples_per_peak)
        return track.file

    def process_block(self, block: Sequence[Sequence[float]]) -> None:
        """Handle one block of per-channel input samples."""
        if not self.is_recording:
            return
        channels = [list(data) for data in block]
        with self._lock:
            if self._writer is not None:
                self._writer.write(channels)
                if self.current_index is not None:
                    self.tracks[self.current_index].thumbnail.add_block(
                        self.next_sample, channels
                    )
                self.next_sample += len(channels[0]) if channels else 0
                self.playhead_position = self.next_sample / self.sample_rate
        self.current_level = mean_abs_level(channels[0]) if channels else 0.0

    def delete(self, index: int) -> Path:
        """Remove track ``index`` and its file from disk; return the removed path."""
        if not 0 <= index < len(self.tracks):
            raise IndexError(f"no recording at index {index}")
        if self.is_recording and index == self.current_index:
            raise RecorderError("cannot delete the recording in progress")
        track = self.tracks.pop(index)
        if track.file.exists():
            track.file.unlink()
        if self.current_index is not None:
            if self.current_index == index:
                self.current_index = None
            elif self.current_index > index:
                self.current_index -= 1
        return track.file

    def thumbnail(self, index: int) -> Thumbnail | None:
        """Return the waveform of track ``index``, or None if there is no such track."""
        if not 0 <= index < len(self.tracks):
            return None
        return self.tracks[index].thumbnail