"""Environment-driven settings.

Values come from the process environment, after ``.env`` in the project root
has been loaded with python-dotenv. Missing variables fall back to the
defaults below.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError

ROOT = Path(__file__).parent.parent

ReplyDialect = Literal["marker", "structured"]
ProviderFormat = Literal["openai", "koboldcpp"]


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_key: str = ""
    provider_url: str = "https://openrouter.ai/api/v1"
    provider_format: ProviderFormat = "openai"
    model: str = "deepseek/deepseek-r1:free"
    timeout: float = 60.0
    temperature: float = 0.7
    max_tokens: int = 1500
    reply_dialect: ReplyDialect = "marker"
    referer: str = "https://day-one-adventure-game.vercel.app"
    title: str = "Text Adventure Game"


_ENV_FIELDS = {
    "OPENROUTER_API_KEY": "api_key",
    "LLM_PROVIDER_URL": "provider_url",
    "LLM_PROVIDER_FORMAT": "provider_format",
    "LLM_MODEL": "model",
    "LLM_TIMEOUT": "timeout",
    "LLM_TEMPERATURE": "temperature",
    "LLM_MAX_TOKENS": "max_tokens",
    "REPLY_DIALECT": "reply_dialect",
    "APP_REFERER": "referer",
    "APP_TITLE": "title",
}


def load_settings(env_file: Path | None = None) -> Settings:
    """Build Settings from the environment.

    Raises ValueError when a variable holds an unsupported value
    (e.g. REPLY_DIALECT=yaml).
    """
    load_dotenv(env_file or ROOT / ".env")
    fields = {
        field: os.environ[var]
        for var, field in _ENV_FIELDS.items()
        if os.getenv(var, "") != ""
    }
    try:
        return Settings.model_validate(fields)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
