# Client for the OpenAI Chat Completions API, blocking and streaming.

from typing import Iterator, List, Optional, Tuple, Dict, Any
from openai import OpenAI
from ..types import Message, ModelParams


class OpenAIClient:
    def __init__(self, model: str = "gpt-4o-mini", api_key: Optional[str] = None, client: Optional[OpenAI] = None):
        self.model = model
        self.client = client or OpenAI(api_key=api_key)

    def set_model(self, model: str):
        self.model = model

    def _request(self, messages: List[Message], params: ModelParams) -> Dict[str, Any]:
        return {
            "model": params.model or self.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": params.temperature if params.temperature is not None else 0.3,
            "max_tokens": params.max_tokens or 1000,
        }

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        req = self._request(messages, params)
        resp = self.client.chat.completions.create(**req)
        text = (resp.choices[0].message.content or "").strip()
        meta = {"engine": "openai", "model": req["model"]}
        return text, meta

    def stream(self, messages: List[Message], params: ModelParams) -> Iterator[str]:
        resp = self.client.chat.completions.create(stream=True, **self._request(messages, params))
        for event in resp:
            if not event.choices:
                continue
            delta = event.choices[0].delta.content
            if delta:
                yield delta
