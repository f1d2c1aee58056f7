from __future__ import annotations

from pydantic import BaseModel, Field

from studywise.modules.workspaces.models import Label, ReminderType


class WorkspaceCreate(BaseModel):
    name: Label = Field(..., description="Subject name of the workspace")


class NoteCreate(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)


class ReminderCreate(BaseModel):
    title: Label
    date: str = Field(..., description="ISO date or datetime")
    type: ReminderType = ReminderType.OTHER


class XPAward(BaseModel):
    amount: int = Field(..., ge=0, le=1000)


class XPRead(BaseModel):
    xp: int
