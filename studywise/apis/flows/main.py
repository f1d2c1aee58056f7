from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from studywise.apis.deps import assistant_dep, store_dep
from studywise.core.config import settings
from studywise.modules.flows.main import StudyAssistant
from studywise.modules.flows.registry import FLOWS
from studywise.modules.flows.schemas import (
    ConceptExplanation,
    Motivation,
    NotesDigest,
    SpeechOutput,
    StudyScheduleOutput,
    WeaknessAnalysis,
)
from studywise.modules.workspaces.store import WorkspaceStore
from .schemas import FlowErrorResponse, FlowInfo


router = APIRouter()

PREFIX = f"/{settings.app.version}/flows"

# Route segment per flow name
ROUTES = {
    "study_schedule": "schedule",
    "explain_concept": "explain",
    "analyze_weaknesses": "weaknesses",
    "process_notes": "notes",
    "generate_motivation": "motivation",
    "text_to_speech": "speech",
}

XP_PROCESS_NOTES = 50
XP_SPEECH = 10

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    422: {"model": FlowErrorResponse},
    502: {"model": FlowErrorResponse},
    504: {"model": FlowErrorResponse},
}

FlowPayload = dict[str, Any]


@router.get(PREFIX, response_model=list[FlowInfo], tags=["flows"])
async def list_flows() -> list[FlowInfo]:
    return [
        FlowInfo(
            name=spec.name,
            kind=spec.kind,
            description=spec.description,
            path=f"{PREFIX}/{ROUTES[spec.name]}",
        )
        for spec in FLOWS.values()
    ]


@router.post(
    f"{PREFIX}/schedule",
    response_model=StudyScheduleOutput,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
    tags=["flows"],
)
async def study_schedule(
    payload: FlowPayload = Body(...),
    assistant: StudyAssistant = Depends(assistant_dep),
) -> StudyScheduleOutput:
    return await assistant.generate_study_schedule(payload)


@router.post(
    f"{PREFIX}/explain",
    response_model=ConceptExplanation,
    responses=ERROR_RESPONSES,
    tags=["flows"],
)
async def explain_concept(
    payload: FlowPayload = Body(...),
    assistant: StudyAssistant = Depends(assistant_dep),
) -> ConceptExplanation:
    return await assistant.explain_concept(payload)


@router.post(
    f"{PREFIX}/weaknesses",
    response_model=WeaknessAnalysis,
    responses=ERROR_RESPONSES,
    tags=["flows"],
)
async def analyze_weaknesses(
    payload: FlowPayload = Body(...),
    assistant: StudyAssistant = Depends(assistant_dep),
) -> WeaknessAnalysis:
    return await assistant.analyze_weaknesses(payload)


@router.post(
    f"{PREFIX}/notes",
    response_model=NotesDigest,
    responses=ERROR_RESPONSES,
    tags=["flows"],
)
async def process_notes(
    payload: FlowPayload = Body(...),
    assistant: StudyAssistant = Depends(assistant_dep),
    store: WorkspaceStore = Depends(store_dep),
) -> NotesDigest:
    result = await assistant.process_notes(payload)
    store.add_xp(XP_PROCESS_NOTES)
    return result


@router.post(
    f"{PREFIX}/motivation",
    response_model=Motivation,
    responses=ERROR_RESPONSES,
    tags=["flows"],
)
async def generate_motivation(
    payload: FlowPayload = Body(...),
    assistant: StudyAssistant = Depends(assistant_dep),
) -> Motivation:
    return await assistant.generate_motivation(payload)


@router.post(
    f"{PREFIX}/speech",
    response_model=SpeechOutput,
    responses=ERROR_RESPONSES,
    tags=["flows"],
)
async def generate_speech(
    payload: FlowPayload = Body(...),
    assistant: StudyAssistant = Depends(assistant_dep),
    store: WorkspaceStore = Depends(store_dep),
) -> SpeechOutput:
    result = await assistant.generate_speech(payload)
    store.add_xp(XP_SPEECH)
    return result
