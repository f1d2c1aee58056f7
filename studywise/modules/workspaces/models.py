"""Pydantic models for the dashboard's stored study data.

These mirror what the dashboard used to keep in browser storage: workspaces
with their notes, reminders and the XP counter, now kept in one versioned
document owned by ``WorkspaceStore``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

STATE_VERSION = 1


# Names and titles shown in lists; surrounding whitespace is dropped
Label = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def _new_id() -> str:
    return uuid4().hex


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class StoredModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class Note(StoredModel):
    id: str = Field(default_factory=_new_id)
    title: str
    content: str
    date: str = Field(default_factory=_now_iso)


class Workspace(StoredModel):
    id: str = Field(default_factory=_new_id)
    name: Label
    notes: list[Note] = Field(default_factory=list)


class ReminderType(str, Enum):
    EXAM = "exam"
    STUDY = "study"
    ASSIGNMENT = "assignment"
    OTHER = "other"


class Reminder(StoredModel):
    id: str = Field(default_factory=_new_id)
    title: Label
    date: str
    type: ReminderType = ReminderType.OTHER


class StudyState(StoredModel):
    version: int = STATE_VERSION
    workspaces: list[Workspace] = Field(default_factory=list)
    reminders: list[Reminder] = Field(default_factory=list)
    xp: int = Field(default=0, ge=0)


class NoteHit(StoredModel):
    workspace_id: str
    workspace_name: str
    note: Note
