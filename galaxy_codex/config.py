from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # LLM settings
    anthropic_api_key: str = ""
    article_model: str = "claude-3-5-sonnet-20241022"
    article_max_tokens: int = 2048
    system_message: str = """You are an expert tutor building an explorable knowledge graph. For the topic you are given, write a concise educational article in Markdown.

Use proper Markdown formatting:
- Headers with ## for sections
- Bold for emphasis using **text**
- Lists with - or numbers

Whenever you mention another concept a student should explore next, wrap it in double square brackets, for example [[Machine Learning]]. Mention between 4 and 8 such concepts. Never nest brackets.
"""

    # Content backend settings. An empty URL generates articles in-process.
    content_backend_url: str = ""
    content_protocol: Literal["stream", "single"] = "stream"
    request_timeout: float = 120.0
    keep_alive_interval: float = 15.0

    # Graph settings
    seed_topic: str = "Artificial Intelligence"
    extract_while_streaming: bool = False

    log_level: str = "INFO"  # Can be DEBUG, INFO, WARNING, ERROR, CRITICAL


settings = Settings()
