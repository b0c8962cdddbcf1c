"""Configuration management for cmdgen."""

from __future__ import annotations

import os
import shutil
import tempfile
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ApiKeyNotConfiguredError, InvalidModelFormatError, ModelNotConfiguredError

DEFAULT_HOME = Path.home() / ".command-generator"
SCRATCH_DIR_NAME = "command-generator-validation"
TIMEOUT_UTILITIES = ("timeout", "gtimeout")
MODEL_NOT_CONFIGURED_ERROR = "Model not configured. Set CMDGEN_MODEL (e.g., 'openai:gpt-4o-mini') or pass --model."


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="CMDGEN_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        protected_namespaces=(),
    )

    # Model Configuration
    model: str | None = Field(default=None, description="Model in provider:model form")
    api_key: str | None = Field(default=None, description="API key for the LLM provider")
    api_base: str | None = Field(default=None, description="Optional API base URL")
    max_tokens: int = Field(default=1024, description="Maximum tokens for one model response")
    model_timeout_seconds: int = Field(default=60, description="Timeout for one model call in seconds")

    # Engine Configuration
    max_attempts: int = Field(default=3, description="Validated command attempts per request")
    max_questions: int = Field(default=8, description="Clarification questions allowed per request")
    max_input_prompt_rejections: int = Field(
        default=3, description="Candidates with runtime read prompts rejected before giving up"
    )
    history_lines: int = Field(default=80, description="Shell history lines included in the prompt")
    generated_history_lines: int = Field(default=80, description="Previously generated commands in the prompt")
    context_turns: int = Field(default=12, description="In-session turns included in the prompt")

    # Validation Configuration
    runtime_timeout_seconds: float = Field(default=2.0, description="Wall-clock bound of the runtime check")
    runtime_max_command_length: int = Field(default=400, description="Longest command eligible for the runtime check")

    # System Configuration
    home: Path = Field(default=DEFAULT_HOME, description="Base directory for sessions and cache")
    log_level: str = Field(default="WARNING", description="Log level")

    @property
    def sessions_dir(self) -> Path:
        return self.home.expanduser() / "sessions"

    @property
    def cache_dir(self) -> Path:
        return self.home.expanduser() / ".cache"

    @property
    def provider(self) -> str:
        return self.split_model()[0]

    def split_model(self) -> tuple[str, str]:
        """Split `provider:model` into its two parts."""
        if not self.model:
            raise ModelNotConfiguredError(MODEL_NOT_CONFIGURED_ERROR)
        provider, separator, name = self.model.partition(":")
        if not separator or not provider.strip() or not name.strip():
            raise InvalidModelFormatError(f"Model must be in provider:model form, got '{self.model}'.")
        return provider.strip().lower(), name.strip()

    @property
    def resolved_api_key(self) -> str:
        if self.api_key:
            return self.api_key
        provider = self.provider
        env_name = f"{provider.upper()}_API_KEY"
        value = os.getenv(env_name, "").strip()
        if not value:
            raise ApiKeyNotConfiguredError(f"API key not configured. Set CMDGEN_API_KEY or {env_name}.")
        return value


def get_settings(**overrides: Any) -> Settings:
    """Get application settings.

    Args:
        overrides: Explicit values (usually from CLI flags); ``None`` values are ignored

    Returns:
        Settings instance
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    return Settings(**values)


@dataclass(frozen=True)
class ShellEnvironment:
    """Snapshot of the process environment used by one validation request."""

    shell: str
    home: Path | None
    cwd: Path
    path: str
    scratch_dir: Path
    timeout_bin: str | None = None
    runtime_timeout_seconds: float = 2.0
    max_runtime_command_length: int = 400

    @classmethod
    def from_os(cls, settings: Settings | None = None) -> ShellEnvironment:
        shell = os.getenv("SHELL", "").strip() or "sh"
        home_value = os.getenv("HOME", "").strip()
        path = os.getenv("PATH", os.defpath)
        timeout_bin = next(
            (found for name in TIMEOUT_UTILITIES if (found := shutil.which(name, path=path)) is not None),
            None,
        )
        env = cls(
            shell=shell,
            home=Path(home_value) if home_value else None,
            cwd=Path.cwd(),
            path=path,
            scratch_dir=Path(tempfile.gettempdir()) / SCRATCH_DIR_NAME,
            timeout_bin=timeout_bin,
        )
        if settings is None:
            return env
        return replace(
            env,
            runtime_timeout_seconds=settings.runtime_timeout_seconds,
            max_runtime_command_length=settings.runtime_max_command_length,
        )

    def which(self, name: str) -> str | None:
        """Resolve an executable against this snapshot's PATH."""
        return shutil.which(name, path=self.path)
