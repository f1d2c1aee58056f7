from __future__ import annotations

from pydantic import BaseModel, Field


class FlowInfo(BaseModel):
    name: str
    kind: str
    description: str
    path: str


class ViolationRead(BaseModel):
    path: str
    message: str


class FlowErrorResponse(BaseModel):
    error: str = Field(..., description="Error class name")
    flow: str | None = None
    message: str
    violations: list[ViolationRead] = Field(default_factory=list)
