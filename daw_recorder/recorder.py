"""Single-take audio recorder that streams input blocks to a WAV file."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from datetime import datetime
from os import PathLike
from pathlib import Path

from daw_recorder.levels import Thumbnail, mean_abs_level
from daw_recorder.wavwriter import ThreadedWavWriter, recording_path

RECORDINGS_FOLDER = "JUCE_records"
CHANNELS = 2
BITS = 16
WRITER_BUFFER = 32768


class RecorderError(Exception):
    """Raised when a recording cannot be started or written."""


class Recorder:
    """Records stereo input into timestamped WAV files, one take at a time.

    Files go into a ``JUCE_records`` folder inside ``directory``. While a take
    is running, every block passed to :meth:`process_block` is written to disk,
    added to :attr:`thumbnail` and used to update :attr:`current_level`.
    """

    def __init__(self, directory: str | PathLike[str], sample_rate: float = 44100.0) -> None:
        if sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        self.directory = Path(directory)
        self.sample_rate = float(sample_rate)
        self.is_recording = False
        self.current_level = 0.0
        self.next_sample = 0
        self.playhead_position = 0.0
        self.last_recording: Path | None = None
        self.thumbnail = Thumbnail(CHANNELS, self.sample_rate)
        self._writer: ThreadedWavWriter | None = None
        self._lock = threading.Lock()

    @property
    def recordings_folder(self) -> Path:
        return self.directory / RECORDINGS_FOLDER

    def prepare(self, sample_rate: float) -> None:
        """Set the sample rate used for the next take."""
        if sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        self.sample_rate = float(sample_rate)

    def start(self, now: datetime | None = None) -> Path:
        """Begin a new take and return the file it is written to.

        If a take is already running, nothing changes and its path is returned.
        """
        if self.is_recording and self.last_recording is not None:
            return self.last_recording
        folder = self.recordings_folder
        try:
            folder.mkdir(parents=True, exist_ok=True)
            path = recording_path(folder, now)
            if path.exists():
                path.unlink()
            writer = ThreadedWavWriter(path, self.sample_rate, CHANNELS, BITS, WRITER_BUFFER)
        except OSError as exc:
            raise RecorderError(f"cannot open recording file: {exc}") from exc

        self.last_recording = path
        self.thumbnail.reset(CHANNELS, self.sample_rate)
        self.next_sample = 0
        self.playhead_position = 0.0
        with self._lock:
            self._writer = writer
        self.is_recording = True
        return path

    def stop(self) -> Path | None:
        """Finish the running take and return its file, or None if idle."""
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
        return self.last_recording

    def process_block(self, block: Sequence[Sequence[float]]) -> None:
        """Handle one block of per-channel input samples."""
        if not self.is_recording:
            return
        channels = [list(data) for data in block]
        with self._lock:
            if self._writer is not None:
                self._writer.write(channels)
                self.thumbnail.add_block(self.next_sample, channels)
                self.next_sample += len(channels[0]) if channels else 0
                self.playhead_position = self.next_sample / self.sample_rate
        self.current_level = mean_abs_level(channels[0]) if channels else 0.0