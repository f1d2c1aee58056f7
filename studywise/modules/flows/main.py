"""Study flows service class and module-level entrypoints.

Every flow runs the same pipeline: validate input, render the prompt, call
the model once, validate the output. The service holds no per-call state,
so one instance can serve concurrent requests.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel

from studywise.core.errors import StudyWiseError
from studywise.core.logging import get_logger
from studywise.modules.flows import audio
from studywise.modules.flows.adapter import GeminiAdapter, ModelAdapter
from studywise.modules.flows.prompts import render
from studywise.modules.flows.registry import (
    ANALYZE_WEAKNESSES,
    EXPLAIN_CONCEPT,
    GENERATE_MOTIVATION,
    PROCESS_NOTES,
    STUDY_SCHEDULE,
    TEXT_TO_SPEECH,
    FlowSpec,
    get_flow,
)
from studywise.modules.flows.schemas import (
    ConceptExplanation,
    Motivation,
    NotesDigest,
    SpeechInput,
    SpeechOutput,
    StudyScheduleOutput,
    WeaknessAnalysis,
)
from studywise.modules.flows.validation import (
    decode_media,
    parse_output,
    validate_input,
)

logger = get_logger(__name__)

FlowInput = Union[BaseModel, Mapping[str, Any]]


class StudyAssistant:
    """Runs the study flows against a model adapter."""

    def __init__(
        self,
        adapter: Optional[ModelAdapter] = None,
        *,
        timeout: Optional[float] = None,
    ) -> None:
        self._adapter = adapter
        self.timeout = timeout

    @property
    def adapter(self) -> ModelAdapter:
        if self._adapter is None:
            self._adapter = GeminiAdapter()
        return self._adapter

    def render_prompt(self, flow: Union[str, FlowSpec], data: FlowInput) -> str:
        """Validate ``data`` and return the prompt the model would receive."""
        spec = get_flow(flow) if isinstance(flow, str) else flow
        validated = validate_input(spec, data)
        if spec.template is None:
            return validated.text  # type: ignore[attr-defined]
        return render(spec.template, validated)

    async def run(self, flow: Union[str, FlowSpec], data: FlowInput) -> BaseModel:
        spec = get_flow(flow) if isinstance(flow, str) else flow
        started = time.perf_counter()
        extra = {"flow": spec.name}
        logger.info("flow started", extra=extra)
        try:
            validated = validate_input(spec, data)
            if spec.kind == "speech":
                result = await self._run_speech(spec, validated)
            else:
                result = await self._run_text(spec, validated)
        except StudyWiseError as exc:
            logger.warning(
                "flow failed after %.0fms: %s: %s",
                (time.perf_counter() - started) * 1000,
                type(exc).__name__,
                exc,
                extra=extra,
            )
            raise
        logger.info(
            "flow completed in %.0fms",
            (time.perf_counter() - started) * 1000,
            extra=extra,
        )
        return result

    async def _run_text(self, spec: FlowSpec, validated: BaseModel) -> BaseModel:
        prompt = render(spec.template, validated)
        raw = await self.adapter.generate_text(
            prompt,
            flow=spec.name,
            output_schema=spec.output_json_schema(),
            timeout=self.timeout,
        )
        return parse_output(spec, raw)

    async def _run_speech(self, spec: FlowSpec, validated: SpeechInput) -> SpeechOutput:
        media = await self.adapter.generate_speech(
            validated.text,
            voice=validated.voice.value,
            flow=spec.name,
            timeout=self.timeout,
        )
        pcm = decode_media(spec, media)
        return SpeechOutput(audio_data_uri=audio.pcm_to_wav_data_uri(pcm))

    async def generate_study_schedule(self, data: FlowInput) -> StudyScheduleOutput:
        return await self.run(STUDY_SCHEDULE, data)  # type: ignore[return-value]

    async def explain_concept(self, data: FlowInput) -> ConceptExplanation:
        return await self.run(EXPLAIN_CONCEPT, data)  # type: ignore[return-value]

    async def analyze_weaknesses(self, data: FlowInput) -> WeaknessAnalysis:
        return await self.run(ANALYZE_WEAKNESSES, data)  # type: ignore[return-value]

    async def process_notes(self, data: FlowInput) -> NotesDigest:
        return await self.run(PROCESS_NOTES, data)  # type: ignore[return-value]

    async def generate_motivation(self, data: FlowInput) -> Motivation:
        return await self.run(GENERATE_MOTIVATION, data)  # type: ignore[return-value]

    async def generate_speech(self, data: FlowInput) -> SpeechOutput:
        return await self.run(TEXT_TO_SPEECH, data)  # type: ignore[return-value]

    def run_sync(self, flow: Union[str, FlowSpec], data: FlowInput) -> BaseModel:
        """Synchronous wrapper if an event loop is unavailable."""
        return asyncio.run(self.run(flow, data))


_default: Optional[StudyAssistant] = None


def get_assistant() -> StudyAssistant:
    global _default
    if _default is None:
        _default = StudyAssistant()
    return _default


async def generate_study_schedule(data: FlowInput) -> StudyScheduleOutput:
    return await get_assistant().generate_study_schedule(data)


async def explain_concept(data: FlowInput) -> ConceptExplanation:
    return await get_assistant().explain_concept(data)


async def analyze_weaknesses(data: FlowInput) -> WeaknessAnalysis:
    return await get_assistant().analyze_weaknesses(data)


async def process_notes(data: FlowInput) -> NotesDigest:
    return await get_assistant().process_notes(data)


async def generate_motivation(data: FlowInput) -> Motivation:
    return await get_assistant().generate_motivation(data)


async def generate_speech(data: FlowInput) -> SpeechOutput:
    return await get_assistant().generate_speech(data)
