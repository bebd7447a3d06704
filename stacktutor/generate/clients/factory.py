# Pick a model client from explicit settings; no client reads the environment itself.

from stacktutor.settings import Settings

from .echo_dev_client import EchoDevClient


def build_model_client(cfg: Settings):
    provider = (cfg.MODEL_PROVIDER or "echo").lower()
    if provider == "ollama":
        from .ollama_client import OllamaClient
        return OllamaClient(model=cfg.OLLAMA_MODEL, host=cfg.OLLAMA_HOST)
    if provider == "openai":
        if not cfg.OPENAI_API_KEY:
            raise ValueError("MODEL_PROVIDER=openai requires OPENAI_API_KEY")
        from .openai_client import OpenAIClient
        return OpenAIClient(model=cfg.OPENAI_MODEL, api_key=cfg.OPENAI_API_KEY)
    if provider == "echo":
        return EchoDevClient()
    raise ValueError(f"Unknown MODEL_PROVIDER: {cfg.MODEL_PROVIDER}")
