"""Study flows module exports."""

from .adapter import GeminiAdapter, MediaPayload, ModelAdapter
from .main import (
    StudyAssistant,
    analyze_weaknesses,
    explain_concept,
    generate_motivation,
    generate_speech,
    generate_study_schedule,
    process_notes,
)
from .registry import FLOWS, FlowSpec, get_flow

__all__ = [
    "FLOWS",
    "FlowSpec",
    "GeminiAdapter",
    "MediaPayload",
    "ModelAdapter",
    "StudyAssistant",
    "analyze_weaknesses",
    "explain_concept",
    "generate_motivation",
    "generate_speech",
    "generate_study_schedule",
    "get_flow",
    "process_notes",
]
