# Dummy model client for local dev and tests: no network, deterministic chunks.

from typing import Iterator, List, Optional, Tuple, Dict, Any
from ..types import Message, ModelParams

DEFAULT_FORGE_SCRIPT = """\
Here is your API.

[START_CODE:package.json]
{
  "name": "echo-api",
  "main": "server.js",
  "dependencies": { "express": "^4.19.2" }
}
[END_CODE]

[START_CODE:server.js]
const express = require('express');
const app = express();
app.get('/health', (req, res) => res.json({ ok: true }));
app.listen(3000);
[END_CODE]

[START_EXPLANATION]
A single Express server exposing a health endpoint.
[END_EXPLANATION]

[START_DOCS]
`GET /health` returns `{"ok": true}`.
[END_DOCS]

[START_DEPLOYMENT]
Run `npm install` then `node server.js`.
[END_DEPLOYMENT]
"""


class EchoDevClient:
    def __init__(self, script: Optional[str] = None, chunk_size: int = 24):
        self.model = "echo-dev"
        self.script = script
        self.chunk_size = max(1, chunk_size)

    def set_model(self, model: str):
        self.model = model

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        if self.script is not None:
            text = self.script
        else:
            user_inputs = [m.content for m in messages if m.role == "user"]
            text = f"[ECHO RESPONSE]\n{user_inputs[-1] if user_inputs else '(no user input)'}"
        meta = {"engine": "echo", "model": self.model, "temp": params.temperature, "max_tokens": params.max_tokens}
        return text, meta

    def stream(self, messages: List[Message], params: ModelParams) -> Iterator[str]:
        text = self.script if self.script is not None else DEFAULT_FORGE_SCRIPT
        for i in range(0, len(text), self.chunk_size):
            yield text[i:i + self.chunk_size]
