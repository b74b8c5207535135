"""
Audio decoding and playback for narrated briefings.

Narration arrives as base64-encoded little-endian 16-bit PCM. Samples are
converted to float32 in [-1, 1] by dividing by 32768.0.
"""

import asyncio
import base64
from dataclasses import dataclass
from typing import Optional, Protocol

import numpy as np


PCM16_SCALE = 32768.0
DEFAULT_SAMPLE_RATE = 24000


@dataclass
class AudioBuffer:
    """Decoded audio, shaped (channels, frames)."""
    samples: np.ndarray
    sample_rate: int = DEFAULT_SAMPLE_RATE

    @property
    def num_channels(self) -> int:
        return self.samples.shape[0]

    @property
    def frame_count(self) -> int:
        return self.samples.shape[1]

    @property
    def duration_seconds(self) -> float:
        return self.frame_count / self.sample_rate

    def channel(self, index: int) -> np.ndarray:
        return self.samples[index]


def decode_base64_audio(encoded: str) -> bytes:
    return base64.b64decode(encoded)


def decode_pcm16(
    data: bytes,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    num_channels: int = 1,
) -> AudioBuffer:
    """Decode interleaved little-endian int16 PCM into float samples."""
    if len(data) % 2:
        raise ValueError(f"PCM16 data must have an even byte length, got {len(data)}")
    raw = np.frombuffer(data, dtype="<i2")
    frame_count = len(raw) // num_channels
    interleaved = raw[: frame_count * num_channels].reshape(frame_count, num_channels)
    samples = interleaved.T.astype(np.float32) / np.float32(PCM16_SCALE)
    return AudioBuffer(samples=samples, sample_rate=sample_rate)


class AudioSink(Protocol):
    """
    Playback device; returns when playback has finished.

    Cancelling the play() call must stop output.
    """

    async def play(self, buffer: AudioBuffer) -> None: ...


class SimulatedAudioSink:
    """Headless sink: 'plays' by waiting for the buffer's duration."""

    def __init__(self):
        self.last_played: Optional[AudioBuffer] = None
        self.play_count = 0

    async def play(self, buffer: AudioBuffer) -> None:
        self.last_played = buffer
        self.play_count += 1
        await asyncio.sleep(buffer.duration_seconds)
