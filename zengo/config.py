"""
Engine configuration.

Loaded from YAML into a pydantic model. Every key is optional; the defaults
reproduce the standard difficulty table.

Example zengo.yaml:
    log_level: INFO
    hesitation_threshold_ms: 1000
    fallback_board_size: 5
    difficulty:
      3: {multiplier: 1.0, memory_load: 9, spatial_complexity: 1.0}
      5: {multiplier: 1.3, memory_load: 25, spatial_complexity: 1.6}
      7: {multiplier: 1.7, memory_load: 49, spatial_complexity: 2.3}
"""

import logging
from pathlib import Path
from typing import Dict, Union

import yaml
from pydantic import BaseModel, Field, field_validator

from .scoring.difficulty import DIFFICULTY_CONFIG, DifficultyLevel

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class EngineConfig(BaseModel):
    """Configuration for the round engine and scoring pipeline."""
    difficulty: Dict[int, DifficultyLevel] = Field(default_factory=lambda: dict(DIFFICULTY_CONFIG))
    fallback_board_size: int = 5
    hesitation_threshold_ms: float = Field(default=1000.0, gt=0)
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level


def load_config(config_path: Union[str, Path]) -> EngineConfig:
    """Load engine configuration from a YAML file."""
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return EngineConfig(**data)


def configure_logging(config: EngineConfig) -> None:
    """Install a root handler at the configured level (for applications, not libraries)."""
    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)
    logging.getLogger("zengo").setLevel(config.log_level)
