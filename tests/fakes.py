# Fake collaborators shared across test modules.

from typing import Iterator, List, Tuple, Dict, Any

from stacktutor.generate.types import Message, ModelParams

REFERENCE_RESPONSE = (
    "Sure! Here is the API.\n"
    "[START_CODE:package.json]\n{\"name\": \"blog\"}\n[END_CODE]\n"
    "[START_CODE:src/server.js]\nconst a = [1, 2];\nconsole.log(a[0]);\n[END_CODE]\n"
    "[START_EXPLANATION]\nExpress app with [bracketed] notes.\n[END_EXPLANATION]\n"
    "[START_DOCS]\n## GET /posts\n[END_DOCS]\n"
    "[START_DEPLOYMENT]\nDeploy to Render.\n[END_DEPLOYMENT]\n"
    "Good luck!"
)


class ScriptedClient:
    """Streams fixed chunks, optionally failing after them; records what it was asked."""

    def __init__(self, chunks: List[str], fail_with: Exception = None):
        self.model = "scripted"
        self.chunks = chunks
        self.fail_with = fail_with
        self.calls: List[Tuple[List[Message], ModelParams]] = []

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        self.calls.append((messages, params))
        return "".join(self.chunks), {"engine": "scripted", "model": self.model}

    def stream(self, messages: List[Message], params: ModelParams) -> Iterator[str]:
        self.calls.append((messages, params))
        for c in self.chunks:
            yield c
        if self.fail_with is not None:
            raise self.fail_with
