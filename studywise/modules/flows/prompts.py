"""Prompt templates for the study flows and the renderer that fills them.

A template is a tuple of nodes. Rendering walks the nodes against the
validated input (dumped to a plain dict) and concatenates the pieces:

- ``Text``: literal text
- ``Var``: a field from the current scope
- ``When``: a block rendered only when a field is present and non-empty
- ``Each``: a block rendered once per list element; dict elements expose
  their own fields, scalar elements are exposed as ``this``
- ``Entries``: a block rendered once per mapping entry, in insertion order,
  exposing ``key`` and ``value``

User text is substituted as-is. Nothing is escaped or filtered, so prompt
injection through notes or concepts is possible and is not defended against.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Union

from pydantic import BaseModel


class TemplateError(KeyError):
    """A template referenced a name that is not in scope."""


@dataclass(frozen=True)
class Text:
    literal: str


@dataclass(frozen=True)
class Var:
    name: str


@dataclass(frozen=True)
class When:
    name: str
    body: "Template"


@dataclass(frozen=True)
class Each:
    name: str
    body: "Template"


@dataclass(frozen=True)
class Entries:
    name: str
    body: "Template"


Node = Union[Text, Var, When, Each, Entries]
Template = tuple[Node, ...]


def format_value(value: Any) -> str:
    """Deterministic text form of a scalar or list of scalars."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, (list, tuple)):
        return ", ".join(format_value(v) for v in value)
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _lookup(scope: Mapping[str, Any], name: str) -> Any:
    try:
        return scope[name]
    except KeyError:
        raise TemplateError(f"template variable {name!r} is not defined") from None


def _render_nodes(nodes: Template, scope: Mapping[str, Any], out: list[str]) -> None:
    for node in nodes:
        if isinstance(node, Text):
            out.append(node.literal)
        elif isinstance(node, Var):
            out.append(format_value(_lookup(scope, node.name)))
        elif isinstance(node, When):
            value = scope.get(node.name)
            if value is not None and value != "" and value != [] and value != {}:
                _render_nodes(node.body, scope, out)
        elif isinstance(node, Each):
            for item in _lookup(scope, node.name) or []:
                if isinstance(item, Mapping):
                    inner = {**scope, **item, "this": item}
                else:
                    inner = {**scope, "this": item}
                _render_nodes(node.body, inner, out)
        elif isinstance(node, Entries):
            mapping = _lookup(scope, node.name) or {}
            for key, value in mapping.items():
                _render_nodes(node.body, {**scope, "key": key, "value": value}, out)
        else:
            raise TypeError(f"unsupported template node: {node!r}")


def render(template: Template, context: Union[BaseModel, Mapping[str, Any]]) -> str:
    """Render ``template`` against a validated input model or plain mapping."""
    scope = context.model_dump() if isinstance(context, BaseModel) else dict(context)
    out: list[str] = []
    _render_nodes(template, scope, out)
    return "".join(out)


STUDY_SCHEDULE_TEMPLATE: Template = (
    Text(
        "You are an AI study assistant specialized in creating personalized study plans.\n\n"
        "Generate a comprehensive study schedule, a revision plan, and identify focus areas "
        "for a student based on the provided information.\n\n"
        "Subjects: "
    ),
    Var("subjects"),
    Text("\nExam Date: "),
    Var("exam_date"),
    Text("\nDaily Free Time: "),
    Var("daily_free_time"),
    Text(
        " hours\n\n"
        "Create a daily study schedule until the exam date. For each day, list specific "
        "activities and allocate study time for each subject. Ensure the schedule is "
        "realistic given the daily free time.\n\n"
        "The revision plan should specify when and which topics or subjects need to be "
        "revisited.\n\n"
        "The focus areas should highlight specific topics or subjects that require more "
        "attention based on typical student struggles and the time available.\n\n"
        "Respond only with a JSON object conforming to the output schema."
    ),
)


EXPLAIN_CONCEPT_TEMPLATE: Template = (
    Text(
        "You are an expert academic tutor. Your task is to explain a difficult academic "
        "concept simply, provide a clear example, and then generate a practice question.\n\n"
        "Concept: "
    ),
    Var("concept"),
    Text(
        "\n\nPlease provide your response in a structured JSON format with the following fields:\n"
        "- explanation: A simple and clear explanation of the concept.\n"
        "- example: A relevant and understandable example.\n"
        "- practiceQuestion: A practice question to test understanding."
    ),
)


ANALYZE_WEAKNESSES_TEMPLATE: Template = (
    Text(
        "You are an AI-powered study assistant specializing in identifying student "
        "weaknesses and providing targeted revision advice.\n\n"
        "Analyze the provided student performance data and identify their weak areas. "
        "Then, provide specific and actionable revision suggestions.\n\n"
        "Performance Data:\n\n"
        "Quiz Results:\n"
    ),
    Each(
        "quiz_results",
        (
            Text("- Topic: "),
            Var("topic"),
            Text(", Correct: "),
            Var("is_correct"),
            Text("\n"),
        ),
    ),
    Text("\nTime Spent Per Subject:\n"),
    Entries(
        "time_spent_per_subject",
        (
            Text("- Subject: "),
            Var("key"),
            Text(", Time Spent (minutes): "),
            Var("value"),
            Text("\n"),
        ),
    ),
    Text("\nMistake Patterns: "),
    Var("mistake_patterns"),
)


PROCESS_NOTES_TEMPLATE: Template = (
    Text(
        "You are an AI-powered study assistant. Your goal is to help students review "
        "their study materials effectively.\n"
        "You will be provided with study notes. Your tasks are:\n"
        "1. Summarize the provided notes concisely.\n"
        "2. Generate a set of flashcards (front/back pairs) based on key concepts in the notes.\n"
        "3. Create 5 multiple-choice quiz questions based on the notes, each with at least "
        "4 options and a clear correct answer. Ensure the correct answer is always one of "
        "the provided options, copied exactly.\n\n"
        "Here are the study notes:\n"
    ),
    Var("notes_content"),
    Text("\n\n"),
    When("context", (Text("Additional context: "), Var("context"), Text("\n\n"))),
    Text(
        "Please provide the output in a structured JSON format as described by the "
        "output schema."
    ),
)


MOTIVATION_TEMPLATE: Template = (
    Text(
        "You are a supportive AI study coach.\n"
        "Generate a motivational message and a practical study tip for a student.\n\n"
        "Current Subjects: "
    ),
    Var("subjects"),
    Text("\nCurrent Streak: "),
    Var("streak"),
    Text(
        " days\n\n"
        "The motivation should be encouraging and the tip should be actionable and "
        "related to the subjects if possible."
    ),
)
