"""Configuration management - env, .env and an optional YAML overlay."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from chat_adapter.models import ReasoningDisplay

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant. Provide concise, useful information and ideas. "
    "Be clear and direct when giving rules information or practical advice."
)

DEFAULT_PAYLOAD_TEMPLATE = """{
  "model": "{{Model}}",
  "messages": [
    {
      "role": "system",
      "content": "{{SystemMessage}}"
    },
    {
      "role": "user",
      "content": "{{UserMessage}}"
    }
  ]
}"""

DEFAULT_API_URL = "api.openai.com/v1/chat/completions"
DEFAULT_MODELS = "gpt-4o, gpt-3.5-turbo"
DEFAULT_RESPONSE_PATH = "choices.0.message.content"
ADAPTER_PROFILE_FILE = "adapter.yaml"


class Settings(BaseSettings):
    """Application settings from environment and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8000, description="Bind port")

    # Endpoint
    llm_api_url: str = Field(default=DEFAULT_API_URL, description="Chat endpoint, scheme optional")
    llm_use_https: bool = Field(default=True, description="Prefix https:// rather than http://")
    llm_api_key: str = Field(default="", description="Bearer token, optional for local endpoints")
    llm_models: str = Field(default=DEFAULT_MODELS, description="Comma-separated; first is default")
    request_timeout: float = Field(default=60.0, description="Seconds per HTTP attempt")

    # Request/response shape
    llm_payload_template: str = Field(default=DEFAULT_PAYLOAD_TEMPLATE, description="JSON with {{...}} placeholders")
    llm_response_path: str = Field(default=DEFAULT_RESPONSE_PATH, description="Dotted path to the reply")
    reasoning_end_tag: str = Field(default="", description="Delimiter ending the reasoning preamble")
    reasoning_display: ReasoningDisplay = Field(default=ReasoningDisplay.TRUNCATE)

    # Conversation
    message_history: int = Field(default=10, description="Turns kept per request (0 = unbounded)")
    global_context: str = Field(default="", description="Merged into the system turn")

    config_dir: Path | None = Field(default=None, description="Directory holding adapter.yaml")


class AdapterConfig(BaseModel):
    """Read-only snapshot consumed by one exchange."""

    model_config = ConfigDict(frozen=True)

    api_url: str = DEFAULT_API_URL
    use_https: bool = True
    api_key: str = ""
    models: str = DEFAULT_MODELS
    payload_template: str = DEFAULT_PAYLOAD_TEMPLATE
    response_path: str = DEFAULT_RESPONSE_PATH
    reasoning_end_tag: str = ""
    reasoning_display: ReasoningDisplay = ReasoningDisplay.TRUNCATE
    history_limit: int = 10
    global_context: str = ""
    request_timeout: float = 60.0

    @field_validator("models", mode="before")
    @classmethod
    def _join_model_list(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return ", ".join(str(v) for v in value)
        return value

    @property
    def endpoint(self) -> str:
        """Full URL. An explicit scheme in api_url wins over use_https."""
        url = self.api_url.strip()
        if url.startswith(("http://", "https://")):
            return url
        return ("https://" if self.use_https else "http://") + url

    @property
    def model_list(self) -> list[str]:
        return [m.strip() for m in self.models.split(",") if m.strip()]

    @property
    def default_model(self) -> str:
        models = self.model_list
        return models[0] if models else ""


def load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load YAML config file."""
    if not config_path.exists():
        return {}
    with config_path.open() as f:
        return yaml.safe_load(f) or {}


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()


def get_adapter_profile(config_dir_str: str = "") -> dict[str, Any]:
    """Load adapter.yaml overrides. Read on every call so edits apply to the next exchange."""
    if not config_dir_str:
        config_dir = Path(__file__).parent.parent.parent / "config"
    else:
        config_dir = Path(config_dir_str)
    return load_yaml_config(config_dir / ADAPTER_PROFILE_FILE)


def load_adapter_config(settings: Settings | None = None) -> AdapterConfig:
    """Build the snapshot from settings, then apply adapter.yaml keys on top."""
    settings = settings or get_settings()
    values: dict[str, Any] = {
        "api_url": settings.llm_api_url,
        "use_https": settings.llm_use_https,
        "api_key": settings.llm_api_key,
        "models": settings.llm_models,
        "payload_template": settings.llm_payload_template,
        "response_path": settings.llm_response_path,
        "reasoning_end_tag": settings.reasoning_end_tag,
        "reasoning_display": settings.reasoning_display,
        "history_limit": settings.message_history,
        "global_context": settings.global_context,
        "request_timeout": settings.request_timeout,
    }
    profile = get_adapter_profile(str(settings.config_dir or ""))
    for key, value in profile.items():
        if key not in AdapterConfig.model_fields:
            logger.warning("Ignoring unknown key in %s: %s", ADAPTER_PROFILE_FILE, key)
            continue
        values[key] = value
    return AdapterConfig(**values)
