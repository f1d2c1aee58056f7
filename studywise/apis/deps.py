from __future__ import annotations

from functools import lru_cache

from studywise.core.config import settings
from studywise.modules.flows.main import StudyAssistant, get_assistant
from studywise.modules.workspaces.store import WorkspaceStore


def assistant_dep() -> StudyAssistant:
    return get_assistant()


@lru_cache(maxsize=1)
def store_dep() -> WorkspaceStore:
    """Process-wide store; tests override this dependency."""
    return WorkspaceStore(settings.store.path)
