"""Pydantic models describing the input and output of every study flow.

Models use snake_case attributes in Python and camelCase names on the wire,
which is what the dashboard sends and what the model is asked to return.
Unknown keys are dropped rather than rejected.
"""

from __future__ import annotations

import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


class FlowModel(BaseModel):
    """Shared configuration for flow inputs and outputs."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
        revalidate_instances="always",
    )

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


# -- Study schedule ---------------------------------------------------------


class StudyScheduleInput(FlowModel):
    subjects: list[str] = Field(
        ..., description="A list of subjects the student needs to study."
    )
    exam_date: str = Field(
        ..., description="The date of the exam in YYYY-MM-DD format."
    )
    daily_free_time: float = Field(
        ...,
        description="The number of hours the student has free each day to study.",
    )

    @field_validator("exam_date")
    @classmethod
    def _validate_exam_date(cls, v: str) -> str:
        try:
            datetime.date.fromisoformat(v)
        except ValueError:
            raise ValueError("expected a date in YYYY-MM-DD format") from None
        return v


class ScheduleDay(FlowModel):
    date: str = Field(
        ..., description="The date for the study session in YYYY-MM-DD format."
    )
    activities: list[str] = Field(
        ...,
        description='A list of study activities for the day, e.g. "Study Math - 2 hours".',
    )


class StudyScheduleOutput(FlowModel):
    study_schedule: list[ScheduleDay] = Field(
        ..., description="A personalized daily study schedule."
    )
    revision_plan: list[str] = Field(
        ..., description="A plan outlining when and what to revise."
    )
    focus_areas: list[str] = Field(
        ..., description="Key areas for the student to focus on."
    )


# -- Concept explanation ----------------------------------------------------


class ConceptInput(FlowModel):
    concept: str = Field(..., description="The academic concept to be explained.")


class ConceptExplanation(FlowModel):
    explanation: str = Field(
        ..., description="A simple and clear explanation of the concept."
    )
    example: str = Field(..., description="A relevant and understandable example.")
    practice_question: str = Field(
        ..., description="A practice question to test understanding."
    )


# -- Weakness analysis ------------------------------------------------------


class QuizResult(FlowModel):
    topic: str = Field(..., description="The topic of the quiz question.")
    is_correct: StrictBool = Field(
        ..., description="Whether the answer to the question was correct."
    )


Minutes = Annotated[StrictInt, Field(ge=0)]


class WeaknessInput(FlowModel):
    quiz_results: list[QuizResult] = Field(
        ..., description="Quiz results indicating correctness for each topic."
    )
    time_spent_per_subject: dict[str, Minutes] = Field(
        ..., description="Subject name to time spent in minutes."
    )
    mistake_patterns: str = Field(
        ..., description="Common mistake patterns observed during study."
    )


class WeaknessAnalysis(FlowModel):
    weak_areas: list[str] = Field(
        ..., description="Specific weak areas or topics identified."
    )
    revision_suggestions: list[str] = Field(
        ...,
        description='Specific revision suggestions, e.g. "Revise Chapter 3 of Calculus on derivatives."',
    )


# -- Notes processing -------------------------------------------------------


class NotesInput(FlowModel):
    notes_content: str = Field(
        ...,
        description="Raw text of the study notes, typed or extracted from a PDF.",
    )
    context: Optional[str] = Field(
        default=None,
        description='Optional subject area for the notes, e.g. "History Chapter 5".',
    )


class Flashcard(FlowModel):
    front: str = Field(..., description="The question or term on the front.")
    back: str = Field(..., description="The answer or definition on the back.")


class QuizQuestion(FlowModel):
    question: str = Field(..., description="The quiz question.")
    options: list[str] = Field(
        ...,
        min_length=4,
        description="Possible answers for the question.",
    )
    correct_answer: str = Field(
        ...,
        description="The correct answer, which must be one of the options.",
    )

    @model_validator(mode="after")
    def _answer_among_options(self) -> "QuizQuestion":
        if self.correct_answer not in self.options:
            raise ValueError(
                f"correctAnswer {self.correct_answer!r} is not one of the options"
            )
        return self


class NotesDigest(FlowModel):
    summary: str = Field(..., description="A concise summary of the notes.")
    flashcards: list[Flashcard] = Field(
        ..., min_length=1, description="Flashcards generated from the notes."
    )
    quiz_questions: list[QuizQuestion] = Field(
        ...,
        min_length=1,
        description="Multiple-choice quiz questions generated from the notes.",
    )


# -- Motivation -------------------------------------------------------------


class MotivationInput(FlowModel):
    subjects: list[str] = Field(
        ..., description="Subjects the student is currently studying."
    )
    streak: StrictInt = Field(..., description="The current daily study streak.")


class Motivation(FlowModel):
    motivation: str = Field(
        ..., description="A short, powerful motivational quote or message."
    )
    daily_tip: str = Field(
        ..., description="A specific study tip tailored to the subjects."
    )


# -- Text to speech ---------------------------------------------------------


class Voice(str, Enum):
    ALGENIB = "Algenib"
    ACHERNAR = "Achernar"
    CYGNUS = "Cygnus"


class SpeechInput(FlowModel):
    text: str = Field(..., description="The text to be converted to speech.")
    voice: Voice = Field(default=Voice.ALGENIB, description="Prebuilt voice name.")


class SpeechOutput(FlowModel):
    audio_data_uri: str = Field(
        ..., description="The generated audio as a WAV data URI."
    )
