# Generator package

# Makes generate/ importable and exposes key interfaces.

from .generator import ChatGenerator
from .types import Message, ChatResponse, ModelParams
from .schemas import InterviewQuestion, LearningPath, PathStep, Quiz, QuizQuestion, StructuredOutputError
from .clients.echo_dev_client import EchoDevClient
from .clients.factory import build_model_client

__all__ = [
    "ChatGenerator", "Message", "ChatResponse", "ModelParams", "EchoDevClient", "build_model_client",
    "Quiz", "QuizQuestion", "LearningPath", "PathStep", "InterviewQuestion", "StructuredOutputError",
]
