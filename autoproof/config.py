"""
Registry configuration.

Defaults can be overridden through environment variables so that a
host can deploy the same build with a different admin:

    AUTOPROOF_ADMIN           initial admin identity
    AUTOPROOF_NULL_IDENTITY   reserved burn/null identity
    AUTOPROOF_START_PAUSED    start with transfers halted (true/1/yes/on)
    AUTOPROOF_LOG_LEVEL       debug | info | warning | error | critical
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_ADMIN = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM"
DEFAULT_NULL_IDENTITY = "SP000000000000000000002Q6VF78"

_TRUTHY = ("true", "1", "yes", "on")


def _env_flag(name: str, default: str = "False") -> bool:
    return os.environ.get(name, default).lower() in _TRUTHY


@dataclass
class RegistryConfig:
    """Parts registry configuration."""
    initial_admin: str = field(default_factory=lambda: os.environ.get("AUTOPROOF_ADMIN", DEFAULT_ADMIN))
    null_identity: str = field(default_factory=lambda: os.environ.get("AUTOPROOF_NULL_IDENTITY", DEFAULT_NULL_IDENTITY))
    start_paused: bool = field(default_factory=lambda: _env_flag("AUTOPROOF_START_PAUSED"))

    # Storage bounds for metadata strings
    max_serial_length: int = 64
    max_material_length: int = 128
    max_origin_length: int = 64
    max_status_length: int = 32

    # Behavior
    record_attestations: bool = True
    log_level: str = field(default_factory=lambda: os.environ.get("AUTOPROOF_LOG_LEVEL", "info"))

    def __post_init__(self):
        if not self.initial_admin:
            raise ValueError("initial_admin must not be empty")
        if self.initial_admin == self.null_identity:
            raise ValueError("initial_admin cannot be the null identity")
        for name in (
            "max_serial_length",
            "max_material_length",
            "max_origin_length",
            "max_status_length",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        self.log_level = self.log_level.lower()
