from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from studywise.apis.deps import store_dep
from studywise.core.config import settings
from studywise.modules.workspaces.models import Note, NoteHit, Reminder, Workspace
from studywise.modules.workspaces.store import WorkspaceStore
from .schemas import NoteCreate, ReminderCreate, WorkspaceCreate, XPAward, XPRead


router = APIRouter()

V = f"/{settings.app.version}"


@router.get(f"{V}/workspaces", response_model=list[Workspace], tags=["workspaces"])
async def list_workspaces(store: WorkspaceStore = Depends(store_dep)) -> list[Workspace]:
    return store.get().workspaces


@router.post(
    f"{V}/workspaces",
    response_model=Workspace,
    status_code=status.HTTP_201_CREATED,
    tags=["workspaces"],
)
async def create_workspace(
    req: WorkspaceCreate, store: WorkspaceStore = Depends(store_dep)
) -> Workspace:
    return store.create_workspace(req.name)


@router.delete(
    f"{V}/workspaces/{{workspace_id}}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["workspaces"],
)
async def delete_workspace(
    workspace_id: str, store: WorkspaceStore = Depends(store_dep)
) -> Response:
    store.remove_workspace(workspace_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    f"{V}/workspaces/{{workspace_id}}/notes",
    response_model=Note,
    status_code=status.HTTP_201_CREATED,
    tags=["workspaces"],
)
async def add_note(
    workspace_id: str, req: NoteCreate, store: WorkspaceStore = Depends(store_dep)
) -> Note:
    return store.add_note(workspace_id, req.title, req.content)


@router.delete(
    f"{V}/workspaces/{{workspace_id}}/notes/{{note_id}}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["workspaces"],
)
async def delete_note(
    workspace_id: str, note_id: str, store: WorkspaceStore = Depends(store_dep)
) -> Response:
    store.delete_note(workspace_id, note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(f"{V}/notes/search", response_model=list[NoteHit], tags=["workspaces"])
async def search_notes(
    q: str = Query(..., min_length=1), store: WorkspaceStore = Depends(store_dep)
) -> list[NoteHit]:
    return store.search_notes(q)


@router.get(f"{V}/reminders", response_model=list[Reminder], tags=["reminders"])
async def list_reminders(store: WorkspaceStore = Depends(store_dep)) -> list[Reminder]:
    return store.get().reminders


@router.post(
    f"{V}/reminders",
    response_model=Reminder,
    status_code=status.HTTP_201_CREATED,
    tags=["reminders"],
)
async def add_reminder(
    req: ReminderCreate, store: WorkspaceStore = Depends(store_dep)
) -> Reminder:
    return store.add_reminder(req.title, req.date, req.type)


@router.delete(
    f"{V}/reminders/{{reminder_id}}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["reminders"],
)
async def delete_reminder(
    reminder_id: str, store: WorkspaceStore = Depends(store_dep)
) -> Response:
    store.remove_reminder(reminder_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(f"{V}/xp", response_model=XPRead, tags=["xp"])
async def get_xp(store: WorkspaceStore = Depends(store_dep)) -> XPRead:
    return XPRead(xp=store.get().xp)


@router.post(f"{V}/xp", response_model=XPRead, tags=["xp"])
async def award_xp(req: XPAward, store: WorkspaceStore = Depends(store_dep)) -> XPRead:
    return XPRead(xp=store.add_xp(req.amount))
