"""Zengo: memory round engine and session scoring."""

from .config import EngineConfig, load_config, configure_logging

__all__ = ["EngineConfig", "load_config", "configure_logging"]
