"""Workspaces module exports."""

from .models import Note, Reminder, ReminderType, StudyState, Workspace
from .store import NotFound, StoreError, StoreVersionError, WorkspaceStore

__all__ = [
    "Note",
    "NotFound",
    "Reminder",
    "ReminderType",
    "StoreError",
    "StoreVersionError",
    "StudyState",
    "Workspace",
    "WorkspaceStore",
]
