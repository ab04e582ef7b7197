"""
Tests for registry configuration.
"""

import pytest

from autoproof.config import DEFAULT_ADMIN, DEFAULT_NULL_IDENTITY, RegistryConfig
from autoproof.registry import NULL_IDENTITY, ErrorCode, PartRegistry


class TestRegistryConfig:

    def test_defaults(self, monkeypatch):
        for name in (
            "AUTOPROOF_ADMIN",
            "AUTOPROOF_NULL_IDENTITY",
            "AUTOPROOF_START_PAUSED",
            "AUTOPROOF_LOG_LEVEL",
        ):
            monkeypatch.delenv(name, raising=False)

        config = RegistryConfig()

        assert config.initial_admin == DEFAULT_ADMIN
        assert config.null_identity == DEFAULT_NULL_IDENTITY == NULL_IDENTITY
        assert config.start_paused is False
        assert config.max_serial_length == 64
        assert config.max_material_length == 128
        assert config.max_origin_length == 64
        assert config.max_status_length == 32
        assert config.log_level == "info"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("AUTOPROOF_ADMIN", "ST_OPERATOR")
        monkeypatch.setenv("AUTOPROOF_NULL_IDENTITY", "BURN")
        monkeypatch.setenv("AUTOPROOF_START_PAUSED", "yes")
        monkeypatch.setenv("AUTOPROOF_LOG_LEVEL", "WARNING")

        config = RegistryConfig()

        assert config.initial_admin == "ST_OPERATOR"
        assert config.null_identity == "BURN"
        assert config.start_paused is True
        assert config.log_level == "warning"

    def test_admin_cannot_be_null_identity(self):
        with pytest.raises(ValueError):
            RegistryConfig(initial_admin=DEFAULT_NULL_IDENTITY, null_identity=DEFAULT_NULL_IDENTITY)

    def test_empty_admin_rejected(self):
        with pytest.raises(ValueError):
            RegistryConfig(initial_admin="")

    def test_non_positive_bound_rejected(self):
        with pytest.raises(ValueError):
            RegistryConfig(initial_admin=DEFAULT_ADMIN, max_status_length=0)

    def test_custom_bounds_apply(self):
        registry = PartRegistry(
            config=RegistryConfig(initial_admin=DEFAULT_ADMIN, max_serial_length=4, log_level="error"),
        )

        assert registry.register_part(DEFAULT_ADMIN, "SN12", "Steel", "F").ok
        result = registry.register_part(DEFAULT_ADMIN, "SN123", "Steel", "F")
        assert result.error == ErrorCode.INVALID_METADATA

    def test_custom_null_identity_blocks_transfers(self):
        registry = PartRegistry(
            config=RegistryConfig(initial_admin=DEFAULT_ADMIN, null_identity="BURN", log_level="error"),
        )
        part_id = registry.register_part(DEFAULT_ADMIN, "SN1", "Steel", "F").unwrap()

        assert registry.transfer_part(DEFAULT_ADMIN, part_id, "BURN").error == ErrorCode.ZERO_ADDRESS
        assert registry.transfer_part(DEFAULT_ADMIN, part_id, DEFAULT_NULL_IDENTITY).ok
