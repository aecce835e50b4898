"""Audio input capture that delivers per-channel sample blocks to a callback."""

from __future__ import annotations

import sys
from array import array
from collections.abc import Callable

BYTES_PER_SAMPLE = 4


def decode_block(data: bytes | bytearray | memoryview, channels: int) -> list[list[float]]:
    """Split interleaved little-endian float32 audio into one list per channel."""
    if channels <= 0:
        raise ValueError("channels must be positive")
    raw = bytes(data)
    if len(raw) % (BYTES_PER_SAMPLE * channels):
        raise ValueError("data does not hold a whole number of frames")
    samples = array("f")
    samples.frombytes(raw)
    if sys.byteorder == "big":
        samples.byteswap()
    return [samples[channel::channels].tolist() for channel in range(channels)]


class CaptureStream:
    """Reads from the default audio input device and hands each block to ``callback``.

    The callback receives a list of per-channel sample lists and runs on the
    audio thread, so it must not block.
    """

    def __init__(
        self,
        callback: Callable[[list[list[float]]], object],
        sample_rate: float = 44100.0,
        channels: int = 2,
        block_size: int = 512,
    ) -> None:
        if sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        if channels <= 0:
            raise ValueError("channels must be positive")
        if block_size <= 0:
            raise ValueError("block_size must be positive")
        self.callback = callback
        self.sample_rate = float(sample_rate)
        self.channels = channels
        self.block_size = block_size
        self._device = None

    @property
    def running(self) -> bool:
        return self._device is not None

    def start(self) -> None:
        """Open the first capture device and begin delivering blocks."""
        if self._device is not None:
            return
        import pygame
        from pygame._sdl2 import audio as sdl_audio

        frequency = int(round(self.sample_rate))
        pygame.mixer.pre_init(frequency, 32, self.channels, self.block_size)
        pygame.init()
        names = sdl_audio.get_audio_device_names(True)
        if not names:
            raise RuntimeError("no audio input device found")
        device = sdl_audio.AudioDevice(
            devicename=names[0],
            iscapture=True,
            frequency=frequency,
            audioformat=sdl_audio.AUDIO_F32,
            numchannels=self.channels,
            chunksize=self.block_size,
            allowed_changes=0,
            callback=self._on_audio,
        )
        device.pause(0)
        self._device = device

    def _on_audio(self, device, data) -> None:
        self.callback(decode_block(data, self.channels))

    def stop(self) -> None:
        """Stop delivering blocks and release the device."""
        device, self._device = self._device, None
        if device is None:
            return
        device.pause(1)
        device.close()