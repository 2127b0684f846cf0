"""Configuration management for realtalk."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_INSTRUCTIONS = """
You are a software assistant. Respond in English.

Tool:
- navigate(page: {pages}) → switch app page.

Use the tool only when user requests a page change. Otherwise, answer normally.
"""


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="REALTALK_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Session
    transcription_model: str = Field(default="gpt-4o-mini-transcribe", description="Input transcription model")
    max_response_tokens: int = Field(default=300, gt=0, description="Maximum output tokens per response")
    instructions: str | None = Field(default=None, description="Session instructions override")

    # Local actions
    pages: list[str] = Field(default_factory=lambda: ["/", "/about"], description="Pages the navigate tool may open")
    dispatch_history_size: int = Field(default=256, gt=0, description="Recently dispatched call ids kept for dedupe")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")

    @field_validator("pages")
    @classmethod
    def _pages_not_empty(cls, value: list[str]) -> list[str]:
        pages = [page.strip() for page in value if page.strip()]
        if not pages:
            raise ValueError("at least one navigable page is required")
        return pages

    def session_instructions(self) -> str:
        if self.instructions:
            return self.instructions
        return DEFAULT_INSTRUCTIONS.format(pages=", ".join(f'"{page}"' for page in self.pages))


def load_settings(**overrides: object) -> Settings:
    """Load settings from the environment, applying explicit overrides last."""

    updates = {key: value for key, value in overrides.items() if value is not None}
    return Settings(**updates)  # type: ignore[arg-type]
