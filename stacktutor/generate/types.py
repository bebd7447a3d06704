# Typed dataclasses shared by the generator, the forge and the model clients.

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any


@dataclass
class Message:
    """Single chat turn: system, user, or assistant."""
    role: str
    content: str


@dataclass
class ModelParams:
    """LLM parameters per request."""
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    model: Optional[str] = None


@dataclass
class ChatResponse:
    """Final response from the generator."""
    text: str
    tool: str
    meta: Dict[str, Any] = field(default_factory=dict)
