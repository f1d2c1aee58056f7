"""Single owner of the stored study data.

``WorkspaceStore`` exposes ``get``/``set``/``subscribe`` over one
``StudyState`` document and a handful of helpers the API uses. When a path
is configured the document is written to disk as JSON after every change;
otherwise it lives in memory for the life of the process.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError

from studywise.core.errors import StudyWiseError
from studywise.core.logging import get_logger
from studywise.modules.workspaces.models import (
    STATE_VERSION,
    Note,
    NoteHit,
    Reminder,
    ReminderType,
    StudyState,
    Workspace,
)

logger = get_logger(__name__)

Subscriber = Callable[[StudyState], None]


class StoreError(StudyWiseError):
    pass


class StoreVersionError(StoreError):
    def __init__(self, found: int) -> None:
        self.found = found
        super().__init__(
            f"stored state has version {found}, expected {STATE_VERSION}"
        )


class NotFound(StoreError):
    pass


class WorkspaceStore:
    def __init__(self, path: Optional[str | Path] = None) -> None:
        self.path = Path(path) if path else None
        self._lock = threading.Lock()
        self._subscribers: list[Subscriber] = []
        self._state = self._load()

    def _load(self) -> StudyState:
        if self.path is None or not self.path.exists():
            return StudyState()
        raw = self.path.read_text(encoding="utf-8")
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StoreError(f"{self.path}: not valid JSON: {exc}") from exc
        version = data.get("version", STATE_VERSION) if isinstance(data, dict) else None
        if version != STATE_VERSION:
            raise StoreVersionError(version)
        try:
            return StudyState.model_validate(data)
        except ValidationError as exc:
            raise StoreError(f"{self.path}: invalid study state: {exc}") from exc

    def _persist(self, state: StudyState) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(
            json.dumps(state.model_dump(by_alias=True, mode="json"), indent=2),
            encoding="utf-8",
        )
        tmp.replace(self.path)

    def get(self) -> StudyState:
        """Return a copy of the current state."""
        with self._lock:
            return self._state.model_copy(deep=True)

    def set(self, state: StudyState) -> StudyState:
        if state.version != STATE_VERSION:
            raise StoreVersionError(state.version)
        return self._update(lambda _: state)

    def _update(self, mutate: Callable[[StudyState], Optional[StudyState]]) -> StudyState:
        """Apply ``mutate`` to a working copy and commit it, all under the lock.

        ``mutate`` edits the copy in place (or returns a replacement). If it
        raises, nothing is stored. Subscribers are notified after the lock is
        released.
        """
        with self._lock:
            working = self._state.model_copy(deep=True)
            state = (mutate(working) or working).model_copy(deep=True)
            self._persist(state)
            self._state = state
            snapshot = state.model_copy(deep=True)
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(snapshot)
        return snapshot

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for every committed change; returns an unsubscribe function."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    # -- helpers -----------------------------------------------------------

    def create_workspace(self, name: str) -> Workspace:
        ws = Workspace(name=name)
        self._update(lambda state: state.workspaces.append(ws))
        logger.info("workspace created: %s", ws.name)
        return ws

    def remove_workspace(self, workspace_id: str) -> None:
        def mutate(state: StudyState) -> None:
            kept = [w for w in state.workspaces if w.id != workspace_id]
            if len(kept) == len(state.workspaces):
                raise NotFound(f"workspace {workspace_id!r} not found")
            state.workspaces = kept

        self._update(mutate)

    def get_workspace(self, workspace_id: str) -> Workspace:
        for ws in self.get().workspaces:
            if ws.id == workspace_id:
                return ws
        raise NotFound(f"workspace {workspace_id!r} not found")

    def add_note(self, workspace_id: str, title: str, content: str) -> Note:
        note = Note(title=title.strip() or "Untitled", content=content)

        def mutate(state: StudyState) -> None:
            for ws in state.workspaces:
                if ws.id == workspace_id:
                    ws.notes.append(note)
                    return
            raise NotFound(f"workspace {workspace_id!r} not found")

        self._update(mutate)
        return note

    def delete_note(self, workspace_id: str, note_id: str) -> None:
        def mutate(state: StudyState) -> None:
            for ws in state.workspaces:
                if ws.id == workspace_id:
                    kept = [n for n in ws.notes if n.id != note_id]
                    if len(kept) == len(ws.notes):
                        raise NotFound(f"note {note_id!r} not found")
                    ws.notes = kept
                    return
            raise NotFound(f"workspace {workspace_id!r} not found")

        self._update(mutate)

    def search_notes(self, query: str) -> list[NoteHit]:
        q = query.strip().lower()
        if not q:
            return []
        hits: list[NoteHit] = []
        for ws in self.get().workspaces:
            for note in ws.notes:
                if q in note.title.lower() or q in note.content.lower():
                    hits.append(
                        NoteHit(workspace_id=ws.id, workspace_name=ws.name, note=note)
                    )
        return hits

    def add_reminder(
        self, title: str, date: str, type: ReminderType = ReminderType.OTHER
    ) -> Reminder:
        reminder = Reminder(title=title, date=date, type=type)

        def mutate(state: StudyState) -> None:
            state.reminders.append(reminder)
            state.reminders.sort(key=lambda r: r.date)

        self._update(mutate)
        return reminder

    def remove_reminder(self, reminder_id: str) -> None:
        def mutate(state: StudyState) -> None:
            kept = [r for r in state.reminders if r.id != reminder_id]
            if len(kept) == len(state.reminders):
                raise NotFound(f"reminder {reminder_id!r} not found")
            state.reminders = kept

        self._update(mutate)

    def add_xp(self, amount: int) -> int:
        def mutate(state: StudyState) -> None:
            state.xp = max(0, state.xp + int(amount))

        return self._update(mutate).xp
