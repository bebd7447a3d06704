# Data structures shared by the forge parser, service and HTTP layer.

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


@dataclass(frozen=True)
class GeneratedFile:
    """One source file extracted from a generation stream."""
    file_path: str
    code: str

    def to_dict(self) -> Dict[str, str]:
        return {"file_path": self.file_path, "code": self.code}


@dataclass
class GenerationResult:
    """Everything extracted from one generation request so far."""
    files: List[GeneratedFile] = field(default_factory=list)
    explanation: str = ""
    documentation: str = ""
    deployment: str = ""
    narrative: str = ""

    @property
    def file_paths(self) -> List[str]:
        return [f.file_path for f in self.files]

    def copy(self) -> "GenerationResult":
        return GenerationResult(
            files=list(self.files),
            explanation=self.explanation,
            documentation=self.documentation,
            deployment=self.deployment,
            narrative=self.narrative,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files": [f.to_dict() for f in self.files],
            "explanation": self.explanation,
            "documentation": self.documentation,
            "deployment": self.deployment,
            "narrative": self.narrative,
        }


class ParseMode(str, Enum):
    NONE = "none"
    IN_CODE = "in_code"
    IN_EXPLANATION = "in_explanation"
    IN_DOCS = "in_docs"
    IN_DEPLOYMENT = "in_deployment"


@dataclass
class ParserState:
    """Parser internals. `pending` holds a tail that may be a split marker."""
    mode: ParseMode = ParseMode.NONE
    current_file_path: str = ""
    buffer: str = ""
    pending: str = ""

    def reset(self) -> None:
        self.mode = ParseMode.NONE
        self.current_file_path = ""
        self.buffer = ""


@dataclass
class GenerationConfig:
    """What the user asked the API forge to build."""
    prompt: str
    language: str = "nodejs"
    framework: str = "express"
    database: str = "mongodb"

    def to_dict(self) -> Dict[str, str]:
        return {
            "prompt": self.prompt,
            "language": self.language,
            "framework": self.framework,
            "database": self.database,
        }
