"""
Optional narrated briefings: service interface, PCM decoding, playback sinks
"""

from .audio import (
    AudioBuffer,
    AudioSink,
    SimulatedAudioSink,
    decode_base64_audio,
    decode_pcm16,
    DEFAULT_SAMPLE_RATE,
    PCM16_SCALE,
)
from .service import NarrationService, NullNarrationService

__all__ = [
    "AudioBuffer",
    "AudioSink",
    "SimulatedAudioSink",
    "decode_base64_audio",
    "decode_pcm16",
    "DEFAULT_SAMPLE_RATE",
    "PCM16_SCALE",
    "NarrationService",
    "NullNarrationService",
]
