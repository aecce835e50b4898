# daw-recorder

A small multi-track audio recorder. It captures stereo input from the default
audio input device, writes each take to a timestamped 16-bit WAV file on a
background thread, and draws a live waveform and an input level meter while
recording. Up to six takes are kept at once; deleting a take also removes its
file from disk.

## Installing

```
pip install .
```

Audio input is read through `pygame` (the first capture device SDL reports is
used). The window is built with `tkinter`, which must be available in your
Python installation.

## Running

```
daw-recorder [--directory DIR] [--sample-rate RATE] [--block-size FRAMES]
```

- `--directory`: folder the takes are written to (default: `~/Documents`).
- `--sample-rate`: sample rate in Hz (default: 44100).
- `--block-size`: frames per captured block (default: 512).

Press **Record** to start a new take and **Stop** to finish it; a dialog then
shows the saved file name. Each take appears as its own track with its
waveform, and a red playhead line marks the track being recorded. The red
**X** on a track deletes it after you confirm. Files are named
`Recording_YYYYMMDD_HHMMSS.wav`. Starting a seventh take shows an error
instead.

If no input device is found, the window still opens and a warning is shown.

## Using it as a library

The recording logic works without the window:

```python
from datetime import datetime
from daw_recorder.session import RecordingSession

session = RecordingSession("takes", 44100.0, 6)
session.start(datetime.now())
session.process_block([[0.0, 0.1, -0.1], [0.0, 0.1, -0.1]])  # left, right
session.stop()                    # closes the file, reloads the waveform from disk

thumb = session.thumbnail(0)      # waveform overview of the first take
print(thumb.total_length, thumb.peaks(0, 0.0, thumb.total_length, 10))
session.delete(0)                 # drops the track and deletes its file
```

`RecordingSession.start` raises `MaxRecordingsError` when the limit is
reached, and `RecorderError` when the file cannot be opened.
`RecordingSession.delete` refuses the take currently being recorded.
`track_layout(count)` gives the on-screen rectangles of the tracks and the
height of the scrollable area.

Other building blocks:

- `daw_recorder.levels`: `mean_abs_level`, `meter_width` and `Thumbnail`, a
  min/max peak summary for drawing waveforms, also loadable from a PCM WAV
  file with `Thumbnail.from_wav`.
- `daw_recorder.wavwriter`: `ThreadedWavWriter`, which writes 8, 16, 24 or
  32-bit PCM WAV data on a background thread and drops blocks (returning
  `False` from `write`) when more than `buffer_size` frames are queued; and
  `recording_path`, which builds the timestamped file name.
- `daw_recorder.recorder`: `Recorder`, a single-take recorder that writes into
  a `JUCE_records` folder inside its directory.
- `daw_recorder.capture`: `CaptureStream`, which delivers captured blocks to a
  callback, and `decode_block`, which splits interleaved float32 audio into
  channels.
- `daw_recorder.gui`: `RecorderWindow`, `status_text` and `main`.

## What it does not do

There is no playback, editing or mixing. The mute and solo controls on each
track are drawn but do nothing. Only the first input device is used, and
there is no way to choose another.

## Tests

```
pip install ".[test]"
pytest
```