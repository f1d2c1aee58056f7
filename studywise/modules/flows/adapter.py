"""Model invocation for the study flows.

Text flows go through pydantic-ai (Gemini or OpenRouter, chosen from
settings); speech goes straight to the google-genai client because
pydantic-ai has no audio output. Imports for the providers are kept lazy to
avoid import-time errors when credentials or extras are missing.

The adapter makes exactly one call per invocation. Retry policy belongs to
the caller.
"""

from __future__ import annotations

import asyncio
import base64
import json
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import httpx
from pydantic_ai import Agent
from pydantic_ai.exceptions import AgentRunError, UserError

from studywise.core.config import settings
from studywise.core.errors import ModelInvocationError, ModelTimeout, NoMediaReturned
from studywise.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class MediaPayload:
    """Base64 media returned by the provider, with its declared codec."""

    content_type: str
    data: str


class ModelAdapter(Protocol):
    async def generate_text(
        self,
        prompt: str,
        *,
        flow: str,
        output_schema: dict,
        timeout: Optional[float] = None,
    ) -> str: ...

    async def generate_speech(
        self,
        text: str,
        *,
        voice: str,
        flow: str = "text_to_speech",
        timeout: Optional[float] = None,
    ) -> MediaPayload: ...


def _build_google_model(model_name: str):
    """Build the Google Gemini model provider (lazy import)."""
    from pydantic_ai.models.google import GoogleModel
    from pydantic_ai.providers.google import GoogleProvider

    provider = GoogleProvider(api_key=settings.models.gemini_api_key)
    return GoogleModel(model_name, provider=provider)


def _build_openrouter_model():
    """Build OpenRouter model via OpenAI-compatible provider (lazy import)."""
    from pydantic_ai.models.openai import OpenAIChatModel
    from pydantic_ai.providers.openai import OpenAIProvider

    if not settings.models.openrouter_api_key:
        raise RuntimeError(
            "OpenRouter API key not configured. Set OPENROUTER_API_KEY in your environment."
        )

    provider = OpenAIProvider(
        api_key=settings.models.openrouter_api_key,
        base_url="https://openrouter.ai/api/v1",
    )
    return OpenAIChatModel(settings.models.openrouter_model, provider=provider)


def _build_model_by_settings():
    provider = (settings.models.provider or "google").lower()
    if provider == "openrouter":
        return _build_openrouter_model()
    return _build_google_model(settings.models.text_model)


def _build_genai_client():
    from google import genai

    return genai.Client(api_key=settings.models.gemini_api_key)


SYSTEM_PROMPT = (
    "You are the engine behind a study assistant for students. "
    "Answer every request with a single JSON object and nothing else: "
    "no markdown, no code fences, no commentary. "
    "Use exactly the field names of the JSON schema below, keep every required "
    "field, and use the declared types (strings as strings, booleans as booleans, "
    "arrays as arrays).\n\n"
    "JSON schema:\n"
)


def _system_prompt(output_schema: dict) -> str:
    return SYSTEM_PROMPT + json.dumps(output_schema, indent=2, sort_keys=True)


def media_from_response(response: Any) -> Optional[MediaPayload]:
    """Return the first inline audio part of a google-genai response, if any."""
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            data = getattr(inline, "data", None) if inline is not None else None
            if not data:
                continue
            if isinstance(data, (bytes, bytearray)):
                encoded = base64.b64encode(bytes(data)).decode("ascii")
            else:
                encoded = str(data)
            return MediaPayload(
                content_type=getattr(inline, "mime_type", None) or "audio/L16",
                data=encoded,
            )
    return None


class GeminiAdapter:
    """Default adapter: pydantic-ai for JSON text, google-genai for speech.

    ``text_model`` accepts any pydantic-ai model (tests pass a
    ``FunctionModel``); ``speech_client`` accepts a ``google.genai.Client``.
    Both are built from settings on first use when omitted.
    """

    def __init__(
        self,
        *,
        text_model: Any = None,
        speech_client: Any = None,
        tts_model: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._text_model = text_model
        self._speech_client = speech_client
        self.tts_model = tts_model or settings.models.tts_model
        self.timeout = timeout if timeout is not None else settings.models.timeout_seconds

    @property
    def text_model(self):
        if self._text_model is None:
            self._text_model = _build_model_by_settings()
        return self._text_model

    @property
    def speech_client(self):
        if self._speech_client is None:
            self._speech_client = _build_genai_client()
        return self._speech_client

    def _setup(self, build, *, flow: str):
        """Run a provider builder, reporting missing credentials as invocation errors."""
        try:
            return build()
        except (UserError, ValueError, RuntimeError) as exc:
            logger.warning("model setup failed: %s", exc, extra={"flow": flow})
            raise ModelInvocationError(flow, str(exc)) from exc

    async def _bounded(self, coro, *, flow: str, timeout: Optional[float]):
        limit = timeout if timeout is not None else self.timeout

        async def call():
            # Timeouts raised by the provider itself must not read as our limit
            try:
                return await coro
            except (TimeoutError, asyncio.TimeoutError) as exc:
                raise ModelInvocationError(flow, str(exc) or "provider timed out") from exc

        try:
            return await asyncio.wait_for(call(), timeout=limit)
        except asyncio.TimeoutError:
            raise ModelTimeout(flow, limit) from None

    async def generate_text(
        self,
        prompt: str,
        *,
        flow: str,
        output_schema: dict,
        timeout: Optional[float] = None,
    ) -> str:
        agent: Agent[None, str] = self._setup(
            lambda: Agent[None, str](
                model=self.text_model,
                output_type=str,
                system_prompt=_system_prompt(output_schema),
                retries=0,
            ),
            flow=flow,
        )
        try:
            res = await self._bounded(agent.run(prompt), flow=flow, timeout=timeout)
        except (AgentRunError, httpx.HTTPError) as exc:
            logger.warning("text model call failed: %s", exc, extra={"flow": flow})
            raise ModelInvocationError(flow, str(exc)) from exc
        return res.output

    async def generate_speech(
        self,
        text: str,
        *,
        voice: str,
        flow: str = "text_to_speech",
        timeout: Optional[float] = None,
    ) -> MediaPayload:
        from google.genai import errors as genai_errors
        from google.genai import types

        config = types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice)
                )
            ),
        )
        client = self._setup(lambda: self.speech_client, flow=flow)
        try:
            response = await self._bounded(
                client.aio.models.generate_content(
                    model=self.tts_model, contents=text, config=config
                ),
                flow=flow,
                timeout=timeout,
            )
        except (genai_errors.APIError, httpx.HTTPError) as exc:
            logger.warning("speech model call failed: %s", exc, extra={"flow": flow})
            raise ModelInvocationError(flow, str(exc)) from exc

        media = media_from_response(response)
        if media is None:
            raise NoMediaReturned(flow)
        return media
