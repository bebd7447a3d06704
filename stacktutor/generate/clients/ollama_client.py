# Client for Ollama local inference over /api/chat.
# Streaming responses arrive as one JSON object per line.

import json
import requests
from typing import Iterator, List, Tuple, Dict, Any
from ..types import Message, ModelParams


class OllamaClient:
    def __init__(self, model: str = "qwen2.5-coder:7b", host: str = "http://localhost:11434", timeout: int = 180):
        self.model = model
        self.host = host.rstrip("/")
        self.timeout = timeout

    def set_model(self, model: str):
        self.model = model

    def _payload(self, messages: List[Message], params: ModelParams, stream: bool) -> Dict[str, Any]:
        return {
            "model": params.model or self.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "stream": stream,
            "options": {
                "temperature": float(params.temperature if params.temperature is not None else 0.3),
                "num_predict": int(params.max_tokens or 1000),
            },
        }

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        payload = self._payload(messages, params, stream=False)
        resp = requests.post(f"{self.host}/api/chat", json=payload, timeout=self.timeout)
        resp.raise_for_status()
        data = resp.json()
        return data.get("message", {}).get("content", "").strip(), {"engine": "ollama", "model": payload["model"]}

    def stream(self, messages: List[Message], params: ModelParams) -> Iterator[str]:
        payload = self._payload(messages, params, stream=True)
        with requests.post(f"{self.host}/api/chat", json=payload, stream=True, timeout=self.timeout) as resp:
            resp.raise_for_status()
            for line in resp.iter_lines(decode_unicode=True):
                if not line:
                    continue
                data = json.loads(line)
                if data.get("error"):
                    raise RuntimeError(f"ollama error: {data['error']}")
                piece = data.get("message", {}).get("content", "")
                if piece:
                    yield piece
                if data.get("done"):
                    break
