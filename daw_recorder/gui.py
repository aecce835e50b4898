"""Desktop window for the multi-track recorder."""

from __future__ import annotations

import argparse
import tkinter as tk
from os import PathLike
from pathlib import Path
from tkinter import messagebox

from daw_recorder.capture import CaptureStream
from daw_recorder.levels import meter_width
from daw_recorder.recorder import RecorderError
from daw_recorder.session import (
    TRACK_HEIGHT,
    TRACK_WIDTH,
    MaxRecordingsError,
    RecordingSession,
    track_layout,
)

REFRESH_MS = 40
BACKGROUND = "#A9A9A9"
MENU_COLOUR = "#4A4A4A"
PANEL_COLOUR = "#6B6B6B"
DISPLAY_COLOUR = "#3A3A3A"
WAVEFORM_COLOUR = "#90EE90"
METER_WIDTH = 400
CONTROLS_WIDTH = 100
X_BUTTON_SIZE = 20


def status_text(is_recording: bool, last_file: str | PathLike[str] | None) -> str:
    """Return the status line shown under the recorder."""
    if is_recording:
        return "RECORDING..."
    if last_file is not None and Path(last_file).exists():
        return f"Last recording: {Path(last_file).name}"
    return "Ready"


class RecorderWindow:
    """Record/stop controls, a level meter and a scrollable list of tracks."""

    def __init__(self, root: tk.Misc, session: RecordingSession) -> None:
        self.root = root
        self.session = session
        self._last_file: Path | None = None

        root.title("Audio Recorder")
        root.geometry("1200x800")
        root.configure(bg=BACKGROUND)

        tk.Frame(root, height=50, bg=MENU_COLOUR).pack(side="top", fill="x")

        tools = tk.Frame(root, height=40, bg="white")
        tools.pack(side="top", fill="x", pady=(0, 10))
        tools.pack_propagate(False)
        self.record_button = tk.Button(
            tools, text="Record", bg="red", width=10, command=self._on_record
        )
        self.record_button.pack(side="left", padx=(5, 10), pady=5)
        self.stop_button = tk.Button(
            tools, text="Stop", bg="#8B0000", fg="white", width=10,
            state="disabled", command=self._on_stop,
        )
        self.stop_button.pack(side="left", pady=5)
        self.meter = tk.Canvas(
            tools, width=METER_WIDTH - 10, height=30, bg="white", highlightthickness=0
        )
        self.meter.pack(side="right", padx=5, pady=5)

        bottom = tk.Frame(root, height=80, bg=PANEL_COLOUR)
        bottom.pack(side="bottom", fill="x", pady=(10, 0))
        bottom.pack_propagate(False)
        self.status = tk.Label(bottom, text="Ready", bg=PANEL_COLOUR, fg="white")
        self.status.pack(side="bottom", pady=5)

        area = tk.Frame(root, bg=BACKGROUND)
        area.pack(side="top", fill="both", expand=True)
        self.tracks_canvas = tk.Canvas(area, bg=BACKGROUND, highlightthickness=0)
        scrollbar = tk.Scrollbar(area, orient="vertical", command=self.tracks_canvas.yview)
        self.tracks_canvas.configure(yscrollcommand=scrollbar.set)
        scrollbar.pack(side="right", fill="y")
        self.tracks_canvas.pack(side="left", fill="both", expand=True)
        self.tracks_canvas.bind("<Button-1>", self._on_click)

        self.refresh()
        self._job = root.after(REFRESH_MS, self._tick)

    def _tick(self) -> None:
        self.refresh()
        self._job = self.root.after(REFRESH_MS, self._tick)

    def refresh(self) -> None:
        """Redraw buttons, meter, status line and every track."""
        recording = self.session.is_recording
        self.record_button.configure(state="disabled" if recording else "normal")
        self.stop_button.configure(state="normal" if recording else "disabled")
        self.status.configure(text=status_text(recording, self._last_file))
        self._draw_meter(recording)
        self._draw_tracks(recording)

    def _draw_meter(self, recording: bool) -> None:
        canvas = self.meter
        canvas.delete("all")
        canvas.create_text(0, 15, text="Level:", anchor="w", fill="black")
        width = METER_WIDTH - 10 - 50
        canvas.create_rectangle(50, 0, 50 + width, 30, fill="black", outline="")
        if recording:
            bar = meter_width(self.session.current_level, width)
            if bar > 0:
                canvas.create_rectangle(50, 0, 50 + bar, 30, fill="lime", outline="")

    def _draw_tracks(self, recording: bool) -> None:
        canvas = self.tracks_canvas
        canvas.delete("all")
        rects, height = track_layout(len(self.session.tracks))
        canvas.configure(scrollregion=(0, 0, TRACK_WIDTH, height))
        for index, (x, y, width, h) in enumerate(rects):
            self._draw_controls(x, y, h)
            self._draw_display(index, x + CONTROLS_WIDTH, y, width - CONTROLS_WIDTH, h, recording)

    def _draw_controls(self, x: int, y: int, height: int) -> None:
        canvas = self.tracks_canvas
        canvas.create_rectangle(x, y, x + CONTROLS_WIDTH, y + height, fill=PANEL_COLOUR, outline="")
        for offset, label in ((5, "mute"), (40, "solo")):
            top = y + offset
            canvas.create_rectangle(
                x + 5, top, x + CONTROLS_WIDTH - 5, top + 30, fill="#505050", outline="black"
            )
            canvas.create_text(x + CONTROLS_WIDTH // 2, top + 15, text=label, fill="white")

    def _draw_display(
        self, index: int, x: int, y: int, width: int, height: int, recording: bool
    ) -> None:
        canvas = self.tracks_canvas
        canvas.create_rectangle(
            x, y, x + width, y + height, fill=DISPLAY_COLOUR, outline="black", width=2
        )
        thumbnail = self.session.thumbnail(index)
        if thumbnail is not None:
            left, top = x + 4, y + 4
            inner_w, inner_h = width - 8, height - 8
            live = recording and self.session.current_index == index
            length = thumbnail.total_length
            if live and self.session.next_sample > 0:
                length = self.session.next_sample / self.session.sample_rate
            if length > 0.0:
                columns = max(1, inner_w // 2)
                band = inner_h / thumbnail.channels
                for channel in range(thumbnail.channels):
                    peaks = thumbnail.peaks(channel, 0.0, length, columns)
                    centre = top + band * channel + band / 2
                    half = band / 2
                    step = inner_w / columns
                    upper = [
                        (left + step * c, centre - hi * half) for c, (_, hi) in enumerate(peaks)
                    ]
                    lower = [
                        (left + step * c, centre - lo * half) for c, (lo, _) in enumerate(peaks)
                    ]
                    points = [coord for point in upper + lower[::-1] for coord in point]
                    canvas.create_polygon(*points, fill=WAVEFORM_COLOUR, outline=WAVEFORM_COLOUR)
            if live:
                px = left + inner_w - 2
                canvas.create_line(px, top, px, top + inner_h, fill="red", width=2)

        bx, by = x + 5, y + height - 25
        canvas.create_oval(bx, by, bx + X_BUTTON_SIZE, by + X_BUTTON_SIZE, fill="red", outline="")
        canvas.create_text(bx + X_BUTTON_SIZE / 2, by + X_BUTTON_SIZE / 2, text="X", fill="white")

    def _on_click(self, event: tk.Event) -> None:
        cx = self.tracks_canvas.canvasx(event.x)
        cy = self.tracks_canvas.canvasy(event.y)
        rects, _ = track_layout(len(self.session.tracks))
        for index, (x, y, _, h) in enumerate(rects):
            bx, by = x + CONTROLS_WIDTH + 5, y + h - 25
            if bx <= cx < bx + X_BUTTON_SIZE and by <= cy < by + X_BUTTON_SIZE:
                self._on_delete(index)
                return

    def _on_record(self) -> None:
        try:
            self.session.start()
        except MaxRecordingsError as exc:
            messagebox.showerror("Error", str(exc), parent=self.root)
        except RecorderError as exc:
            messagebox.showerror("Error", str(exc), parent=self.root)
        self.refresh()

    def _on_stop(self) -> None:
        try:
            path = self.session.stop()
        except RecorderError as exc:
            messagebox.showerror("Error", str(exc), parent=self.root)
            return
        self._last_file = path
        name = path.name if path is not None else "unknown"
        messagebox.showinfo("Save Recording", f"Recording saved as:\n{name}", parent=self.root)
        self.refresh()

    def _on_delete(self, index: int) -> None:
        confirmed = messagebox.askyesno(
            "Delete Recording",
            "Are you sure you want to delete this recording?",
            parent=self.root,
        )
        if not confirmed:
            return
        try:
            removed = self.session.delete(index)
        except (RecorderError, IndexError) as exc:
            messagebox.showerror("Error", str(exc), parent=self.root)
            return
        if removed == self._last_file:
            self._last_file = None
        self.refresh()


def _positive_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a number: {text}") from exc
    if value <= 0:
        raise argparse.ArgumentTypeError("must be positive")
    return value


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {text}") from exc
    if value <= 0:
        raise argparse.ArgumentTypeError("must be positive")
    return value


def main(argv: list[str] | None = None) -> int:
    """Start the recorder window."""
    parser = argparse.ArgumentParser(prog="daw-recorder", description="Audio Recorder")
    parser.add_argument(
        "--directory", type=Path, default=Path.home() / "Documents",
        help="folder recordings are written to",
    )
    parser.add_argument("--sample-rate", type=_positive_float, default=44100.0)
    parser.add_argument("--block-size", type=_positive_int, default=512)
    args = parser.parse_args(argv)

    session = RecordingSession(args.directory, args.sample_rate)
    root = tk.Tk()
    RecorderWindow(root, session)
    capture = CaptureStream(session.process_block, args.sample_rate, 2, args.block_size)
    try:
        capture.start()
    except RuntimeError as exc:
        messagebox.showwarning("Audio Input", f"Audio input unavailable: {exc}", parent=root)
    try:
        root.mainloop()
    finally:
        capture.stop()
        session.stop()
    return 0