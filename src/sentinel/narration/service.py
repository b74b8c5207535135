"""
Narration service interface.

A narration service turns briefing text into base64 PCM16 audio, or returns
None when narration is unsupported. The Groq text models have no audio
output, so the default implementation always returns None.
"""

from typing import Optional, Protocol

from loguru import logger


class NarrationService(Protocol):

    async def generate_audio_briefing(self, text: str) -> Optional[str]: ...


class NullNarrationService:
    """Narration disabled; briefing playback degrades to a no-op"""

    async def generate_audio_briefing(self, text: str) -> Optional[str]:
        logger.warning("Audio briefing generation is currently disabled for Groq models.")
        return None
