"""
Configuration for the daily generation job and the artifact server.

Built once at process start (see daily_generator.main) and passed into the
pipeline by reference; nothing below the entry points reads the environment.

Environment variables:
    ANTHROPIC_API_KEY     credential, required for generation
    CONSTRAINT_MODEL      model id, swappable without a code change
    GEN_MAX_TRIES         attempt bound (positive integer, default 3)
    CONSTRAINT_DAILY_DIR  directory holding <date>.json and latest.json
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_MAX_TRIES = 3
DEFAULT_DAILY_DIR = "daily"

# A single JSON puzzle is small; 2048 leaves room for a long explanation.
DEFAULT_MAX_TOKENS = 2048

# High enough for variety day to day, low enough to respect the JSON contract.
DEFAULT_TEMPERATURE = 0.9


class ConfigError(Exception):
    """Raised when required configuration is missing or malformed."""
    pass


@dataclass(frozen=True)
class GeneratorConfig:
    api_key: str
    model: str = DEFAULT_MODEL
    max_tries: int = DEFAULT_MAX_TRIES
    daily_dir: str = DEFAULT_DAILY_DIR
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE

    def __post_init__(self):
        if not self.api_key:
            raise ConfigError("Missing ANTHROPIC_API_KEY env var.")
        if not self.model:
            raise ConfigError("Model identifier must not be empty.")
        if self.max_tries < 1:
            raise ConfigError(f"max_tries must be a positive integer, got {self.max_tries!r}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GeneratorConfig":
        """
        Builds the config from environment variables.

        Raises:
            ConfigError: If the API key is missing or GEN_MAX_TRIES is not a
                         positive integer.
        """
        env = os.environ if environ is None else environ

        raw_tries = env.get("GEN_MAX_TRIES") or str(DEFAULT_MAX_TRIES)
        try:
            max_tries = int(raw_tries)
        except ValueError:
            raise ConfigError(f"GEN_MAX_TRIES must be a positive integer, got {raw_tries!r}")

        return cls(
            api_key=env.get("ANTHROPIC_API_KEY", ""),
            model=env.get("CONSTRAINT_MODEL") or DEFAULT_MODEL,
            max_tries=max_tries,
            daily_dir=daily_dir_from_env(env),
        )


def daily_dir_from_env(environ: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if environ is None else environ
    return env.get("CONSTRAINT_DAILY_DIR") or DEFAULT_DAILY_DIR
