"""Multi-track audio recorder: WAV takes written in the background, live waveforms and a level meter."""

__version__ = "1.0.0"