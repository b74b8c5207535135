"""
Analysis client: boundary adapter to the LLM reasoning service.

Sends an alert snapshot to Groq (OpenAI-compatible API, JSON mode), validates
the JSON reply against `AnalysisResult` and classifies every failure as
rate-limited, malformed or generic service error. It never retries; retry is
an analyst action on the investigation session.
"""

import asyncio
import json
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Protocol

from dotenv import load_dotenv

load_dotenv()

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError
from loguru import logger

from ..config.config import AnalysisConfig
from ..data.models.alert import Alert
from ..data.models.analysis import AnalysisResult
from .errors import (
    AnalysisError, AnalysisFailure, MalformedResponseError, RateLimitedError, ServiceError,
)
from .prompts import SYSTEM_INSTRUCTIONS, build_analysis_prompt


@dataclass
class AnalysisResponse:
    """Outcome of one analysis request: a result or an error, never both"""
    alert_id: str
    result: Optional[AnalysisResult] = None
    error: Optional[AnalysisError] = None
    execution_time_ms: float = 0.0
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    raw_response: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.result is not None and self.error is None


class AnalysisService(Protocol):
    """Anything the investigation session can ask for an analysis"""

    async def request_analysis(self, alert: Alert) -> AnalysisResponse: ...


def is_rate_limit(exc: BaseException) -> bool:
    """True when the exception carries an explicit rate/quota signal."""
    if isinstance(exc, openai.RateLimitError):
        return True
    if getattr(exc, "status_code", None) == 429 or getattr(exc, "status", None) == 429:
        return True
    code = getattr(exc, "code", None)
    err_type = getattr(exc, "type", None)
    if "rate_limit_exceeded" in (code, err_type):
        return True
    return "429" in str(exc)


def classify_exception(exc: BaseException) -> AnalysisFailure:
    """Map any transport/service exception onto the failure taxonomy."""
    if isinstance(exc, AnalysisFailure):
        return exc
    message = str(exc) or exc.__class__.__name__
    if is_rate_limit(exc):
        return RateLimitedError(message)
    return ServiceError(message)


class AnalysisClient:
    """Reasoning-service client with Groq as primary and OpenAI as fallback provider"""

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        client: Optional[Any] = None,
        tracker: Optional[Any] = None,
    ):
        self.config = config or AnalysisConfig()
        self.model = self.config.model
        self.tracker = tracker

        if client is not None:
            self.client = client
            self.provider = "custom"
        else:
            self.client, self.provider = self._build_client()
        logger.info(f"Initialized AnalysisClient with {self.provider} ({self.model})")

        # Statistics
        self.request_count = 0
        self.success_count = 0
        self.rate_limited_count = 0

    def _build_client(self):
        groq_key = self.config.api_key or os.getenv("GROQ_API_KEY") or os.getenv("API_KEY")
        openai_key = os.getenv("OPENAI_API_KEY")

        if groq_key:
            client = AsyncOpenAI(
                api_key=groq_key,
                base_url=self.config.base_url,
                max_retries=0,
                timeout=self.config.timeout_seconds,
            )
            return client, "groq"
        if openai_key:
            client = AsyncOpenAI(api_key=openai_key, max_retries=0, timeout=self.config.timeout_seconds)
            return client, "openai"
        raise ValueError(
            "AnalysisClient requires GROQ_API_KEY or OPENAI_API_KEY environment variable. "
            "Please set one in your .env file."
        )

    async def request_analysis(self, alert: Alert) -> AnalysisResponse:
        """Request an investigation briefing for `alert`."""
        start_time = datetime.now()
        self.request_count += 1
        content: Optional[str] = None
        usage: Dict[str, int] = {}

        try:
            content, usage = await asyncio.wait_for(
                self._call_llm(build_analysis_prompt(alert), SYSTEM_INSTRUCTIONS),
                timeout=self.config.timeout_seconds,
            )
            result = self._parse_response(content)
        except asyncio.TimeoutError:
            failure = ServiceError(f"Analysis request timed out after {self.config.timeout_seconds:g}s")
            response = self._failed(alert, failure, start_time, content, usage)
        except Exception as e:
            response = self._failed(alert, classify_exception(e), start_time, content, usage)
        else:
            self.success_count += 1
            response = AnalysisResponse(
                alert_id=alert.alert_id,
                result=result,
                execution_time_ms=self._elapsed_ms(start_time),
                prompt_tokens=usage.get("prompt_tokens", 0),
                completion_tokens=usage.get("completion_tokens", 0),
                total_tokens=usage.get("total_tokens", 0),
                raw_response=content,
            )
            logger.info(f"Analysis for {alert.alert_id} completed in {response.execution_time_ms:.0f}ms")

        await self._track(response)
        return response

    def _failed(
        self,
        alert: Alert,
        failure: AnalysisFailure,
        start_time: datetime,
        content: Optional[str],
        usage: Dict[str, int],
    ) -> AnalysisResponse:
        error = failure.to_error()
        if error.is_rate_limited:
            self.rate_limited_count += 1
        logger.warning(f"Analysis for {alert.alert_id} failed ({error.kind.value}): {error.message}")
        return AnalysisResponse(
            alert_id=alert.alert_id,
            error=error,
            execution_time_ms=self._elapsed_ms(start_time),
            prompt_tokens=usage.get("prompt_tokens", 0),
            completion_tokens=usage.get("completion_tokens", 0),
            total_tokens=usage.get("total_tokens", 0),
            raw_response=content,
        )

    async def _call_llm(self, prompt: str, system_prompt: str) -> tuple[str, dict]:
        """Call the chat completion API in JSON mode (returns content and usage dict)"""
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt},
        ]
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
            response_format={"type": "json_object"},
        )

        content = response.choices[0].message.content if response.choices else None
        usage = {
            "prompt_tokens": response.usage.prompt_tokens if response.usage else 0,
            "completion_tokens": response.usage.completion_tokens if response.usage else 0,
            "total_tokens": response.usage.total_tokens if response.usage else 0,
        }
        return content, usage

    def _strip_think_tags(self, response: str) -> str:
        """Strip chain-of-thought thinking tags from response"""
        if "<think>" in response:
            if "</think>" in response:
                think_end = response.find("</think>") + len("</think>")
                return response[think_end:].strip()
            think_start = response.find("<think>") + len("<think>")
            return response[think_start:].strip()
        return response

    def _parse_response(self, content: Optional[str]) -> AnalysisResult:
        """Parse and validate the JSON reply."""
        if not content or not content.strip():
            raise MalformedResponseError("Empty response from AI")

        text = self._strip_think_tags(content).strip()
        # Handle markdown code blocks
        if "```json" in text:
            start = text.find("```json") + 7
            end = text.find("```", start)
            text = text[start:end].strip()
        elif "```" in text:
            start = text.find("```") + 3
            end = text.find("```", start)
            text = text[start:end].strip()

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedResponseError(f"Invalid JSON format: {str(e)[:100]}") from e
        if not isinstance(data, dict):
            raise MalformedResponseError("Expected a single JSON object")

        try:
            return AnalysisResult.model_validate(data)
        except ValidationError as e:
            raise MalformedResponseError(f"Response does not match analysis schema: {e.error_count()} error(s)") from e

    async def _track(self, response: AnalysisResponse) -> None:
        if self.tracker is None:
            return
        try:
            # MLflow calls are blocking
            await asyncio.to_thread(
                self.tracker.log_analysis, response, provider=self.provider, model=self.model
            )
        except Exception as e:
            logger.warning(f"Failed to log to MLflow: {e}")

    @staticmethod
    def _elapsed_ms(start_time: datetime) -> float:
        return (datetime.now() - start_time).total_seconds() * 1000

    def get_stats(self) -> Dict[str, Any]:
        """Get request statistics"""
        return {
            "provider": self.provider,
            "model": self.model,
            "request_count": self.request_count,
            "success_count": self.success_count,
            "rate_limited_count": self.rate_limited_count,
            "success_rate": self.success_count / max(1, self.request_count),
        }
