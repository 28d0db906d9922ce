"""
Configuration Files

Load, save and validate stabilizer configurations and stick scripts.
"""

from .validator import (
    ValidationError,
    ValidationWarning,
    ValidationResult,
    validate_config,
)
from .config_loader import StabilizerConfigLoader, load_command_script

__all__ = [
    "ValidationError",
    "ValidationWarning",
    "ValidationResult",
    "validate_config",
    "StabilizerConfigLoader",
    "load_command_script",
]
