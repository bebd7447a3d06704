# Response models for the structured (JSON) tutor tools.
# The model is asked for camelCase keys; snake_case is accepted too.

from __future__ import annotations

import json
import re
from typing import List, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

T = TypeVar("T", bound=BaseModel)

_FENCED_JSON = re.compile(r"```(?:json)?\s*\n(.*?)\n?```", re.DOTALL)


class StructuredOutputError(ValueError):
    """The model's answer was not the JSON object the tool asked for."""

    def __init__(self, tool: str, message: str):
        super().__init__(message)
        self.tool = tool


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class QuizQuestion(_Schema):
    question: str
    options: List[str] = Field(..., min_length=2)
    correct_answer: str = Field(..., alias="correctAnswer")
    explanation: str


class Quiz(_Schema):
    questions: List[QuizQuestion] = Field(..., min_length=1)


class PathStep(_Schema):
    language_slug: str = Field(..., alias="languageSlug")
    language_name: str = Field(..., alias="languageName")
    topic_slug: str = Field(..., alias="topicSlug")
    topic_title: str = Field(..., alias="topicTitle")
    reason: str


class LearningPath(_Schema):
    title: str
    description: str
    steps: List[PathStep] = Field(..., min_length=1)


class InterviewQuestion(_Schema):
    question: str = Field(..., min_length=1)
    instructions: str = Field(..., min_length=1)


def extract_json(text: str) -> str:
    """Return the JSON payload of a reply, unwrapping a ```json fence if present."""
    match = _FENCED_JSON.search(text)
    return (match.group(1) if match else text).strip()


def parse_structured(tool: str, text: str, model: Type[T], failure: str) -> T:
    payload = extract_json(text or "")
    if not payload:
        raise StructuredOutputError(tool, failure)
    try:
        return model.model_validate(json.loads(payload))
    except (json.JSONDecodeError, ValidationError) as e:
        raise StructuredOutputError(tool, f"{failure} ({e.__class__.__name__})") from e
