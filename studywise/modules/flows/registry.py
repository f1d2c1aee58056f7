"""Static definitions of the study flows.

Each flow name maps to exactly one input/output model pair for the lifetime
of the process; the registry is read-only once this module is imported.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Mapping, Optional

from pydantic import BaseModel

from studywise.core.errors import UnknownFlow
from studywise.modules.flows import prompts
from studywise.modules.flows.schemas import (
    ConceptExplanation,
    ConceptInput,
    Motivation,
    MotivationInput,
    NotesDigest,
    NotesInput,
    SpeechInput,
    SpeechOutput,
    StudyScheduleInput,
    StudyScheduleOutput,
    WeaknessAnalysis,
    WeaknessInput,
)


@dataclass(frozen=True)
class FlowSpec:
    name: str
    input_model: type[BaseModel]
    output_model: type[BaseModel]
    template: Optional[prompts.Template]
    kind: Literal["text", "speech"] = "text"
    description: str = ""

    def output_json_schema(self) -> dict:
        return self.output_model.model_json_schema(by_alias=True)


STUDY_SCHEDULE = FlowSpec(
    name="study_schedule",
    input_model=StudyScheduleInput,
    output_model=StudyScheduleOutput,
    template=prompts.STUDY_SCHEDULE_TEMPLATE,
    description="Daily study schedule, revision plan and focus areas up to an exam.",
)

EXPLAIN_CONCEPT = FlowSpec(
    name="explain_concept",
    input_model=ConceptInput,
    output_model=ConceptExplanation,
    template=prompts.EXPLAIN_CONCEPT_TEMPLATE,
    description="Simple explanation, example and practice question for a concept.",
)

ANALYZE_WEAKNESSES = FlowSpec(
    name="analyze_weaknesses",
    input_model=WeaknessInput,
    output_model=WeaknessAnalysis,
    template=prompts.ANALYZE_WEAKNESSES_TEMPLATE,
    description="Weak areas and revision suggestions from quiz and time data.",
)

PROCESS_NOTES = FlowSpec(
    name="process_notes",
    input_model=NotesInput,
    output_model=NotesDigest,
    template=prompts.PROCESS_NOTES_TEMPLATE,
    description="Summary, flashcards and a multiple-choice quiz from raw notes.",
)

GENERATE_MOTIVATION = FlowSpec(
    name="generate_motivation",
    input_model=MotivationInput,
    output_model=Motivation,
    template=prompts.MOTIVATION_TEMPLATE,
    description="Motivational message and a daily study tip.",
)

TEXT_TO_SPEECH = FlowSpec(
    name="text_to_speech",
    input_model=SpeechInput,
    output_model=SpeechOutput,
    template=None,
    kind="speech",
    description="Reads text aloud and returns a WAV data URI.",
)


def _build_registry(*specs: FlowSpec) -> Mapping[str, FlowSpec]:
    registry: dict[str, FlowSpec] = {}
    for spec in specs:
        if spec.name in registry:
            raise ValueError(f"flow {spec.name!r} is already registered")
        registry[spec.name] = spec
    return MappingProxyType(registry)


FLOWS: Mapping[str, FlowSpec] = _build_registry(
    STUDY_SCHEDULE,
    EXPLAIN_CONCEPT,
    ANALYZE_WEAKNESSES,
    PROCESS_NOTES,
    GENERATE_MOTIVATION,
    TEXT_TO_SPEECH,
)


def get_flow(name: str) -> FlowSpec:
    try:
        return FLOWS[name]
    except KeyError:
        raise UnknownFlow(name) from None
