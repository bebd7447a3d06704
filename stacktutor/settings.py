# stacktutor/settings.py
import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # core
    APP_NAME: str = Field(default="StackTutor")
    ENV: str = Field(default=os.getenv("APP_ENV", "dev"))
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="INFO")

    # model client selection: echo | openai | ollama
    MODEL_PROVIDER: str = Field(default="echo")
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = Field(default="gpt-4o-mini")
    OLLAMA_HOST: str = Field(default="http://localhost:11434")
    OLLAMA_MODEL: str = Field(default="qwen2.5-coder:7b")

    # API forge
    FORGE_MODEL: str | None = None
    FORGE_TEMPERATURE: float = Field(default=0.2)
    FORGE_MAX_TOKENS: int = Field(default=8000)
    HISTORY_LIMIT: int = Field(default=20)
    KEEP_NARRATIVE: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_file=".env.dev",
        extra="ignore",
    )

    @property
    def app_name(self) -> str:
        return self.APP_NAME


settings = Settings()
