"""Error taxonomy shared by the flows, the workspace store and the API edge.

Every failure is raised immediately with enough context for the caller to
decide what to do; nothing here is retried or replaced with defaults.
"""

from __future__ import annotations

from dataclasses import dataclass


class StudyWiseError(Exception):
    """Base class for all package errors."""


@dataclass(frozen=True)
class FieldViolation:
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


class SchemaViolation(StudyWiseError):
    """Input (or output) does not match the declared schema."""

    def __init__(self, flow: str, violations: list[FieldViolation]) -> None:
        self.flow = flow
        self.violations = list(violations)
        detail = "; ".join(str(v) for v in self.violations) or "invalid payload"
        super().__init__(f"{flow}: {detail}")


class OutputSchemaViolation(SchemaViolation):
    """The model responded, but its payload is not a valid output."""


class ModelInvocationError(StudyWiseError):
    """Transport or provider failure while calling the model."""

    def __init__(self, flow: str, message: str) -> None:
        self.flow = flow
        self.provider_message = message
        super().__init__(f"{flow}: {message}")


class ModelTimeout(ModelInvocationError):
    def __init__(self, flow: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(flow, f"model call timed out after {timeout:g}s")


class NoMediaReturned(StudyWiseError):
    """The speech provider answered without any audio payload."""

    def __init__(self, flow: str) -> None:
        self.flow = flow
        super().__init__(f"{flow}: no audio media returned from the model")


class UnknownFlow(StudyWiseError, KeyError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"unknown flow: {name!r}")

    def __str__(self) -> str:
        return self.args[0]
