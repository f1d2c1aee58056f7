"""Input validation and output parsing for the study flows.

Pydantic does the checking; this module turns its errors into
``SchemaViolation``/``OutputSchemaViolation`` with camelCase field paths so
the messages line up with what the caller sent or the model returned.
"""

from __future__ import annotations

import base64
import binascii
import re
from typing import Any, Mapping, Union

from pydantic import BaseModel, ValidationError

from studywise.core.errors import FieldViolation, OutputSchemaViolation, SchemaViolation
from studywise.modules.flows.adapter import MediaPayload
from studywise.modules.flows.registry import FlowSpec

_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*\n(?P<body>.*?)\n?\s*```\s*$", re.DOTALL)


def _violations(exc: ValidationError) -> list[FieldViolation]:
    out: list[FieldViolation] = []
    for err in exc.errors(include_url=False):
        path = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "invalid value")
        if err.get("type") == "missing":
            msg = "required field is missing"
        out.append(FieldViolation(path=path, message=msg))
    return out


def validate_input(spec: FlowSpec, data: Union[BaseModel, Mapping[str, Any]]) -> BaseModel:
    """Validate caller input, accepting a model instance or a plain mapping."""
    if isinstance(data, BaseModel) and not isinstance(data, spec.input_model):
        data = data.model_dump(by_alias=True)
    try:
        return spec.input_model.model_validate(data)
    except ValidationError as exc:
        raise SchemaViolation(spec.name, _violations(exc)) from exc


def strip_code_fence(raw: str) -> str:
    match = _FENCE_RE.match(raw)
    return match.group("body") if match else raw.strip()


def parse_output(spec: FlowSpec, raw: str) -> BaseModel:
    """Parse raw model text into the flow's output model (strict JSON mode)."""
    if not raw or not raw.strip():
        raise OutputSchemaViolation(
            spec.name, [FieldViolation(path="", message="model returned an empty response")]
        )
    try:
        return spec.output_model.model_validate_json(strip_code_fence(raw), strict=True)
    except ValidationError as exc:
        raise OutputSchemaViolation(spec.name, _violations(exc)) from exc


def decode_media(spec: FlowSpec, payload: MediaPayload) -> bytes:
    """Decode the base64 media payload of a speech response into raw PCM."""
    try:
        pcm = base64.b64decode(payload.data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise OutputSchemaViolation(
            spec.name,
            [FieldViolation(path="media", message=f"payload is not valid base64: {exc}")],
        ) from exc
    if not pcm:
        raise OutputSchemaViolation(
            spec.name, [FieldViolation(path="media", message="payload is empty")]
        )
    return pcm
