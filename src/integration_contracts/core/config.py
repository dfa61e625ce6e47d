"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from .enums import LogFormat, UnknownEventPolicy

#: Floor for the shared-vocabulary admission gate.  Config may raise it,
#: never lower it.
MIN_VOCABULARY_SERVICES = 3


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.JSON


class VocabularyConfig(BaseModel):
    min_services: int = MIN_VOCABULARY_SERVICES


class DecodingConfig(BaseModel):
    unknown_policy: UnknownEventPolicy = UnknownEventPolicy.SKIP


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class ContractSettings(BaseSettings):
    """Top-level settings for code that embeds the contract layer.

    Loaded from TOML config files, overridden by environment variables.
    """

    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    vocabulary: VocabularyConfig = Field(default_factory=VocabularyConfig)
    decoding: DecodingConfig = Field(default_factory=DecodingConfig)

    model_config = {"env_prefix": "CONTRACTS_", "env_nested_delimiter": "__"}

    def validate_policy(self) -> None:
        """Reject settings that would loosen the governance gates."""
        from .errors import ConfigError

        if self.vocabulary.min_services < MIN_VOCABULARY_SERVICES:
            raise ConfigError(
                "vocabulary.min_services may not be lower than "
                f"{MIN_VOCABULARY_SERVICES}, got {self.vocabulary.min_services}"
            )


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> ContractSettings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            with open(path, "rb") as f:
                data = tomli.load(f)

    if overrides:
        data.update(overrides)

    settings = ContractSettings(**data)
    settings.validate_policy()
    return settings
