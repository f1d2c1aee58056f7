from __future__ import annotations

import base64
import json
from typing import Optional

import pytest

from studywise.modules.flows.adapter import MediaPayload
from studywise.modules.flows.main import StudyAssistant


class StubAdapter:
    """In-memory adapter returning canned responses and recording every call."""

    def __init__(
        self,
        texts: Optional[dict[str, str]] = None,
        media: Optional[MediaPayload] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.texts = texts or {}
        self.media = media
        self.error = error
        self.calls: list[dict] = []

    async def generate_text(self, prompt, *, flow, output_schema, timeout=None):
        self.calls.append(
            {"kind": "text", "flow": flow, "prompt": prompt, "schema": output_schema}
        )
        if self.error is not None:
            raise self.error
        return self.texts[flow]

    async def generate_speech(self, text, *, voice, flow="text_to_speech", timeout=None):
        self.calls.append({"kind": "speech", "flow": flow, "text": text, "voice": voice})
        if self.error is not None:
            raise self.error
        if self.media is None:
            from studywise.core.errors import NoMediaReturned

            raise NoMediaReturned(flow)
        return self.media


SCHEDULE_JSON = json.dumps(
    {
        "studySchedule": [
            {"date": "2024-12-23", "activities": ["Math - 2 hours", "Physics - 2 hours"]},
            {"date": "2024-12-24", "activities": ["Mixed revision - 4 hours"]},
        ],
        "revisionPlan": ["Revise derivatives on Dec 24"],
        "focusAreas": ["Kinematics"],
    }
)

CONCEPT_JSON = json.dumps(
    {
        "explanation": "Entropy measures disorder.",
        "example": "Ice melting in a warm room.",
        "practiceQuestion": "Why does entropy increase when ice melts?",
    }
)

WEAKNESS_JSON = json.dumps(
    {
        "weakAreas": ["Integration by parts"],
        "revisionSuggestions": ["Revise Chapter 7 of Calculus."],
    }
)

MOTIVATION_JSON = json.dumps(
    {"motivation": "Small steps every day.", "dailyTip": "Use active recall for Math."}
)


def notes_json(**overrides) -> str:
    question = {
        "question": "What does photosynthesis convert light into?",
        "options": ["Chemical energy", "Heat", "Sound", "Motion"],
        "correctAnswer": "Chemical energy",
    }
    question.update(overrides)
    return json.dumps(
        {
            "summary": "Photosynthesis converts light into chemical energy.",
            "flashcards": [{"front": "Photosynthesis", "back": "Light to chemical energy"}],
            "quizQuestions": [question] * 5,
        }
    )


PCM = bytes(range(256)) * 8


@pytest.fixture
def stub_adapter() -> StubAdapter:
    return StubAdapter(
        texts={
            "study_schedule": SCHEDULE_JSON,
            "explain_concept": CONCEPT_JSON,
            "analyze_weaknesses": WEAKNESS_JSON,
            "process_notes": notes_json(),
            "generate_motivation": MOTIVATION_JSON,
        },
        media=MediaPayload(
            content_type="audio/L16;codec=pcm;rate=24000",
            data=base64.b64encode(PCM).decode("ascii"),
        ),
    )


@pytest.fixture
def assistant(stub_adapter: StubAdapter) -> StudyAssistant:
    return StudyAssistant(stub_adapter)
