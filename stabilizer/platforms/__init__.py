"""Stabilizer configurations and named presets."""

from .stabilizer_configs import (
    StabilizerConfig,
    get_config,
    list_configs,
    register_config,
)

__all__ = [
    "StabilizerConfig",
    "get_config",
    "list_configs",
    "register_config",
]
