"""
Engine configuration.

Usage:
    config = EngineConfig(starting_conversation="intro", chars_per_second=40)
    configure_logging(config)

    # Or from a JSON file
    config = EngineConfig.from_file("dialogue_config.json")
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EngineConfig(BaseModel):
    """
    Configuration for the dialogue engine.

    Attributes:
        starting_conversation: Conversation the interpreter opens on
        chars_per_second: Reveal speed of the typewriter effect
        log_level: Level name passed to logging.basicConfig
        max_choice_keys: How many CHOICE_n actions the system honours
    """

    model_config = ConfigDict(validate_assignment=True, extra='forbid')

    starting_conversation: str = "start"
    chars_per_second: float = Field(default=20.0, gt=0)
    log_level: str = "WARNING"
    max_choice_keys: int = Field(default=9, ge=1, le=9)

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def from_file(cls, path: str | Path) -> EngineConfig:
        """Load configuration from a JSON file."""
        path = Path(path)
        return cls.model_validate_json(path.read_text(encoding='utf-8'))

    @property
    def seconds_per_char(self) -> float:
        return 1.0 / self.chars_per_second


def configure_logging(config: EngineConfig | None = None) -> None:
    """Apply the configured log level to the root logger (host entry points only)."""
    config = config or EngineConfig()
    logging.basicConfig(level=config.log_level)
