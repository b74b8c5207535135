"""
Investigation session state machine.

    IDLE -> LOADING -> READY | ERROR
    ERROR -> LOADING            (retry, re-dispatches the same request)
    ERROR -> LOADING -> READY   (synthetic fallback, no external call)
    READY: playback STOPPED <-> PLAYING

Every dispatch is tagged with a RequestToken. A response is applied only if
its token is still the session's current token, so a slow reply for a
previously selected alert can never overwrite the state of the current one.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from loguru import logger

from ..analysis.client import AnalysisResponse, AnalysisService, classify_exception
from ..analysis.errors import AnalysisError, AnalysisErrorKind
from ..analysis.fallback import synthesize_analysis
from ..config.config import SessionConfig
from ..data.models.alert import Alert
from ..data.models.analysis import AnalysisResult
from ..narration.audio import AudioSink, SimulatedAudioSink, decode_base64_audio, decode_pcm16
from ..narration.service import NarrationService, NullNarrationService
from ..report.compositor import ReportCompositor


class SessionState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class PlaybackState(str, Enum):
    STOPPED = "stopped"
    PLAYING = "playing"


class SessionStateError(RuntimeError):
    """Operation not permitted in the session's current state"""


@dataclass(frozen=True)
class RequestToken:
    """Identifies the dispatch a response belongs to"""
    alert_id: str
    generation: int


class InvestigationSession:
    """
    Analysis lifecycle for the currently selected alert.

    Holds at most one of (result, error) at a time; entering LOADING clears
    both. Analysis failures are always recoverable through retry() or
    synthetic_fallback(); narration failures are absorbed.
    """

    def __init__(
        self,
        analysis: AnalysisService,
        config: Optional[SessionConfig] = None,
        narration: Optional[NarrationService] = None,
        audio_sink: Optional[AudioSink] = None,
    ):
        self.analysis = analysis
        self.config = config or SessionConfig()
        self.narration = narration or NullNarrationService()
        self.audio_sink = audio_sink or SimulatedAudioSink()

        self.state = SessionState.IDLE
        self.playback = PlaybackState.STOPPED
        self.alert: Optional[Alert] = None
        self.result: Optional[AnalysisResult] = None
        self.error: Optional[AnalysisError] = None

        self._generation = 0
        self._token: Optional[RequestToken] = None
        self._playback_task: Optional[asyncio.Future] = None

    # ------------------------------------------------------------------
    # Token bookkeeping
    # ------------------------------------------------------------------

    @property
    def token(self) -> Optional[RequestToken]:
        return self._token

    def is_current(self, token: Optional[RequestToken]) -> bool:
        return token is not None and token == self._token

    def _begin_loading(self) -> RequestToken:
        self._generation += 1
        self._token = RequestToken(alert_id=self.alert.alert_id, generation=self._generation)
        self.state = SessionState.LOADING
        self.result = None
        self.error = None
        self._stop_playback()
        return self._token

    def _require(self, *states: SessionState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise SessionStateError(f"Session is {self.state.value}; expected {allowed}")

    # ------------------------------------------------------------------
    # Analysis lifecycle
    # ------------------------------------------------------------------

    def begin_investigation(self, alert: Alert) -> RequestToken:
        """
        Select `alert` for investigation: reset to LOADING synchronously.

        Pair with dispatch(); callers that schedule the dispatch as a task
        call this first so no previous result is visible in between.
        """
        self.alert = alert
        token = self._begin_loading()
        logger.info(f"Investigation started for {alert.alert_id} (generation {token.generation})")
        return token

    async def investigate(self, alert: Alert) -> bool:
        """
        Start investigating `alert`: reset to LOADING and dispatch.

        Returns True if the response was applied, False if it arrived stale.
        """
        token = self.begin_investigation(alert)
        return await self.dispatch(token, alert)

    async def retry(self) -> bool:
        """Manual retry from ERROR: re-dispatch the identical request."""
        self._require(SessionState.ERROR)
        token = self._begin_loading()
        logger.info(f"Retrying analysis for {token.alert_id}")
        return await self.dispatch(token, self.alert)

    async def synthetic_fallback(self) -> bool:
        """From ERROR, produce a local synthetic result after the fixed delay."""
        self._require(SessionState.ERROR)
        token = self._begin_loading()
        alert = self.alert
        logger.info(f"Running synthetic fallback for {alert.alert_id}")

        await asyncio.sleep(self.config.fallback_delay_seconds)
        if not self.is_current(token):
            logger.warning(f"Discarding stale synthetic analysis for {token.alert_id}")
            return False

        self.result = synthesize_analysis(alert)
        self.state = SessionState.READY
        return True

    async def dispatch(self, token: RequestToken, alert: Alert) -> bool:
        """Request the analysis for `token`; False if superseded before or after the call."""
        if not self.is_current(token):
            logger.debug(f"Skipping superseded dispatch for {token.alert_id}")
            return False
        try:
            response = await self.analysis.request_analysis(alert)
        except Exception as e:
            # Services should report failures in the response; never let one escape
            failure = classify_exception(e)
            response = AnalysisResponse(alert_id=alert.alert_id, error=failure.to_error())

        if not self.is_current(token):
            logger.warning(
                f"Discarding stale analysis for {token.alert_id} (generation {token.generation})"
            )
            return False

        if response.success:
            self.result = response.result
            self.error = None
            self.state = SessionState.READY
            logger.info(f"Investigation for {alert.alert_id} ready")
        else:
            self.result = None
            self.error = response.error or AnalysisError(
                kind=AnalysisErrorKind.SERVICE_ERROR, message="Internal Intelligence Error"
            )
            self.state = SessionState.ERROR
            logger.warning(f"Investigation for {alert.alert_id} failed: {self.error.kind.value}")
        return True

    def clear(self) -> None:
        """Deselect: back to IDLE, any in-flight response becomes stale."""
        self._generation += 1
        self._token = None
        self.alert = None
        self.result = None
        self.error = None
        self.state = SessionState.IDLE
        self._stop_playback()

    # ------------------------------------------------------------------
    # Briefing playback
    # ------------------------------------------------------------------

    def _stop_playback(self) -> None:
        """Cancel any audio still playing; at most one playback per session."""
        playback, self._playback_task = self._playback_task, None
        if playback is not None and not playback.done():
            playback.cancel()
            logger.info("Briefing playback stopped")
        self.playback = PlaybackState.STOPPED

    async def play_briefing(self) -> bool:
        """
        Narrate the reasoning text. Returns True if audio was played.

        Ignored unless READY and STOPPED.
        """
        if self.state != SessionState.READY or self.playback == PlaybackState.PLAYING:
            return False

        token = self._token
        self.playback = PlaybackState.PLAYING
        played = False
        try:
            encoded = await self.narration.generate_audio_briefing(self.result.reasoning)
            if encoded and self.is_current(token):
                buffer = decode_pcm16(
                    decode_base64_audio(encoded),
                    sample_rate=self.config.sample_rate,
                    num_channels=self.config.num_channels,
                )
                playback = asyncio.ensure_future(self.audio_sink.play(buffer))
                self._playback_task = playback
                try:
                    await playback
                    played = True
                except asyncio.CancelledError:
                    # Absorb only a stop issued by _stop_playback()
                    if self._playback_task is playback:
                        raise
                finally:
                    if self._playback_task is playback:
                        self._playback_task = None
        except Exception as e:
            logger.warning(f"Briefing playback unavailable: {e}")
        finally:
            if self.is_current(token):
                self.playback = PlaybackState.STOPPED
        return played

    # ------------------------------------------------------------------
    # Escalation
    # ------------------------------------------------------------------

    def confirm_and_draft(self, compositor: ReportCompositor) -> Any:
        """Hand the (alert, result) pair to the report compositor. READY only."""
        self._require(SessionState.READY)
        logger.info(f"Drafting report for {self.alert.alert_id}")
        return compositor.compose(self.alert, self.result)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "alert_id": self.alert.alert_id if self.alert else None,
            "state": self.state.value,
            "playback": self.playback.value,
            "result": self.result.to_wire() if self.result else None,
            "error": {
                "kind": self.error.kind.value,
                "message": self.error.message,
                "user_message": self.error.user_message,
            } if self.error else None,
        }
