"""
oralcheck.config - YAML config loading and validation.

Handles loading oralcheck.yaml from a working directory (or the path named
by ORALCHECK_CONFIG), applying defaults, and validating all parameters.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from oralcheck.exceptions import ConfigError

CONFIG_FILENAME = "oralcheck.yaml"
CONFIG_ENV_VAR = "ORALCHECK_CONFIG"

DEFAULT_FILLER_WORDS: list[str] = [
    "um",
    "uh",
    "like",
    "you know",
    "so",
    "actually",
    "basically",
    "right",
    "i mean",
    "well",
]


class CaptureSettings(BaseModel):
    """Audio capture and per-frame feature extraction parameters."""

    sample_rate: int = Field(default=44100, gt=0)
    frame_size: int = Field(default=2048, ge=16)
    history_cap: int = Field(default=300, gt=0)
    max_recording_seconds: float = Field(default=600.0, gt=0.0)

    silence_threshold: float = Field(default=0.01, ge=0.0)
    min_lag: int = Field(default=10, ge=1)
    max_lag: int = Field(default=500, ge=2)
    min_similarity: float = Field(default=0.5, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def validate_lag_range(self) -> CaptureSettings:
        if self.min_lag >= self.max_lag:
            raise ValueError("min_lag must be smaller than max_lag")
        return self


class OralCheckConfig(BaseModel):
    """Resolved configuration for an Oralcheck installation."""

    llm_backend: str = "openai"
    question_model: str = "gpt-4o-mini"
    transcription_model: str = "gpt-4o-transcribe"
    api_key: str | None = None
    llm_timeout: float | None = Field(default=None, gt=0.0)

    question_count: int = Field(default=4, ge=1, le=20)
    question_max_tokens: int = Field(default=200, gt=0)
    question_temperature: float = Field(default=0.7, ge=0.0, le=2.0)

    filler_words: list[str] = Field(default_factory=lambda: list(DEFAULT_FILLER_WORDS))
    vocabulary_cap: int | None = Field(default=None, gt=0)

    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    capture: CaptureSettings = Field(default_factory=CaptureSettings)

    config_path: Path | None = None

    @field_validator("llm_backend")
    @classmethod
    def validate_llm_backend(cls, v: str) -> str:
        valid = {"openai", "ollama", "lmstudio", "claude"}
        if v not in valid:
            raise ValueError(f"llm_backend must be one of: {valid}")
        return v

    @field_validator("filler_words")
    @classmethod
    def validate_filler_words(cls, v: list[str]) -> list[str]:
        cleaned = [w.strip().lower() for w in v if w and w.strip()]
        if not cleaned:
            raise ValueError("filler_words must contain at least one phrase")
        return cleaned

    @field_validator("vocabulary_cap")
    @classmethod
    def validate_vocabulary_cap(cls, v: int | None) -> int | None:
        from oralcheck.analyze.transcript import SEED_ACADEMIC_WORDS

        seed_size = len(set(SEED_ACADEMIC_WORDS))
        if v is not None and v < seed_size:
            raise ValueError(
                f"vocabulary_cap must be at least {seed_size}, the size of the seed word list"
            )
        return v


def find_config_file(directory: Path | None = None) -> Path | None:
    """Locate the config file: ORALCHECK_CONFIG first, then the directory."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    candidate = (directory or Path.cwd()) / CONFIG_FILENAME
    if candidate.exists():
        return candidate
    return None


def load_config(directory: Path | None = None) -> OralCheckConfig:
    """Load and validate configuration.

    A missing config file yields the built-in defaults.

    Raises:
        ConfigError: If the file is unreadable or fails validation
    """
    config_file = find_config_file(directory)
    if config_file is None:
        return OralCheckConfig()

    if not config_file.exists():
        raise ConfigError(f"Config file not found: {config_file}")

    try:
        with open(config_file, encoding="utf-8") as f:
            raw_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Config file {config_file} must contain a mapping")

    raw_config["config_path"] = config_file
    try:
        return OralCheckConfig(**raw_config)
    except ValueError as e:
        raise ConfigError(f"Invalid configuration in {config_file}: {e}") from e


def create_default_config() -> dict[str, Any]:
    """Create a default config dict suitable for writing to YAML."""
    defaults = OralCheckConfig().model_dump(exclude={"config_path", "api_key"})
    return defaults


def write_config(config: dict[str, Any], path: Path) -> None:
    """Write configuration to a YAML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)
