# ChatGenerator: runs the tutor tools against any model client
# (Ollama, OpenAI, Echo) and returns a ChatResponse.

from __future__ import annotations
import yaml
import os
from typing import List, Optional, Type
from .types import Message, ChatResponse, ModelParams
from .prompts import (
    BASE_TUTOR_RULES,
    JSON_ONLY_RULE,
    STRUCTURED_TEMPLATES,
    TOOL_TEMPLATES,
    build_structured_prompt,
    build_tool_prompt,
)
from .schemas import InterviewQuestion, LearningPath, Quiz, T, parse_structured

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config.yaml")


class ChatGenerator:
    def __init__(self, model_client, config_path: str = DEFAULT_CONFIG_PATH):
        self.model_client = model_client
        self.config_path = config_path
        self.cfg = self._load_config()

    def _load_config(self):
        if not os.path.exists(self.config_path):
            return {}
        with open(self.config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    @property
    def tools(self) -> List[str]:
        return sorted(TOOL_TEMPLATES)

    def _compose_system_message(self) -> str:
        """Global rules plus any system prompt from config.yaml."""
        extra = (self.cfg.get("system_prompt") or "").strip()
        return f"{BASE_TUTOR_RULES}\n{extra}".strip()

    def _tool_param(self, tool: str, key: str, requested, fallback):
        if requested is not None:
            return requested
        tool_cfg = (self.cfg.get("tools") or {}).get(tool) or {}
        return tool_cfg.get(key, self.cfg.get(key, fallback))

    def run_tool(
        self,
        tool: str,
        history: Optional[List[Message]] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **fields,
    ) -> ChatResponse:
        """Main entry point: fill the tool's template and ask the model."""
        user_msg = build_tool_prompt(tool, **fields)
        messages = [
            Message(role="system", content=self._compose_system_message()),
            *(history or []),
            Message(role="user", content=user_msg),
        ]
        params = ModelParams(
            temperature=self._tool_param(tool, "temperature", temperature, 0.3),
            max_tokens=self._tool_param(tool, "max_tokens", max_tokens, 1000),
        )
        text, meta = self.model_client.generate(messages, params)
        return ChatResponse(text=text, tool=tool, meta=meta)

    # thin wrappers, one per tutor tool
    def explain_code(self, code: str, language: str) -> ChatResponse:
        return self.run_tool("explain", code=code, language=language)

    def simplify_topic(self, topic: str) -> ChatResponse:
        return self.run_tool("simplify", topic=topic)

    def review_code(self, code: str, language: str, exercise: str) -> ChatResponse:
        return self.run_tool("review", code=code, language=language, exercise=exercise)

    def debug_code(self, code: str, language: str) -> ChatResponse:
        return self.run_tool("debug", code=code, language=language)

    def project_idea(self, language: str, topics: List[str]) -> ChatResponse:
        return self.run_tool("project-idea", language=language, topics=topics)

    def evaluate_interview(self, question: str, code: str, explanation: str) -> ChatResponse:
        return self.run_tool("interview-eval", question=question, code=code, explanation=explanation)

    # -------------------------
    # Structured tools (JSON answers)
    # -------------------------
    @property
    def structured_tools(self) -> List[str]:
        return sorted(STRUCTURED_TEMPLATES)

    def run_structured(
        self,
        tool: str,
        model: Type[T],
        failure: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **fields,
    ) -> T:
        """Ask for a JSON object and validate it into `model`; raises StructuredOutputError."""
        extra = (self.cfg.get("system_prompt") or "").strip()
        messages = [
            Message(role="system", content=f"{extra}\n{JSON_ONLY_RULE}".strip()),
            Message(role="user", content=build_structured_prompt(tool, **fields)),
        ]
        params = ModelParams(
            temperature=self._tool_param(tool, "temperature", temperature, 0.3),
            max_tokens=self._tool_param(tool, "max_tokens", max_tokens, 1000),
        )
        text, _meta = self.model_client.generate(messages, params)
        return parse_structured(tool, text, model, failure)

    def generate_quiz(self, topic_title: str, topic_content: str, **kw) -> Quiz:
        return self.run_structured(
            "quiz", Quiz, "AI failed to generate a valid quiz.",
            topic_title=topic_title, topic_content=topic_content, **kw,
        )

    def generate_learning_path(self, goal: str, catalog: Optional[List[str]] = None, **kw) -> LearningPath:
        return self.run_structured(
            "learning-path", LearningPath, "AI failed to generate a valid learning path.",
            goal=goal, catalog=catalog or [], **kw,
        )

    def get_interview_question(self, technology: str, **kw) -> InterviewQuestion:
        return self.run_structured(
            "interview-question", InterviewQuestion, "AI failed to generate a valid interview question.",
            technology=technology, **kw,
        )
