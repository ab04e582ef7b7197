"""
Tests for the monitoring module and registry log output.
"""

import io
import json
from unittest.mock import patch

import pytest

from autoproof.config import DEFAULT_ADMIN, RegistryConfig
from autoproof.monitoring import LogLevel, StructuredLogger, configure_logging, get_logger
from autoproof.registry import LogicalClock, PartRegistry


def _lines(output: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in output.getvalue().splitlines()]


class TestStructuredLogger:
    """Tests for StructuredLogger."""

    def test_log_levels(self):
        output = io.StringIO()
        logger = StructuredLogger("test", level=LogLevel.WARNING, output=output)

        logger.debug("debug_event")
        logger.info("info_event")
        logger.warning("warning_event")
        logger.error("error_event")

        assert [r["event"] for r in _lines(output)] == ["warning_event", "error_event"]

    def test_structured_fields(self):
        logger = StructuredLogger("test")

        with patch.object(logger, "_emit") as mock_emit:
            logger.info("part_registered", part_id=1, actor="ST1")

        record = mock_emit.call_args[0][0]
        assert record.event == "part_registered"
        assert record.data == {"part_id": 1, "actor": "ST1"}

    def test_bind_context(self):
        output = io.StringIO()
        logger = StructuredLogger("test", output=output).bind(registry="plant-a")

        logger.info("pause_changed", paused=True)

        record = _lines(output)[0]
        assert record["registry"] == "plant-a"
        assert record["paused"] is True
        assert record["logger_name"] == "test"

    def test_human_format(self):
        output = io.StringIO()
        logger = StructuredLogger("test", output=output, json_format=False)

        logger.warning("transition_denied", "Registry is paused", error_code=103)

        line = output.getvalue()
        assert "[WARNING]" in line
        assert "[transition_denied]" in line
        assert "error_code=103" in line

    def test_configure_logging_from_string(self):
        output = io.StringIO()
        logger = configure_logging("DEBUG", output=output)

        assert logger.level == LogLevel.DEBUG
        assert get_logger() is logger
        assert LogLevel.parse("Warning") is LogLevel.WARNING

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging("verbose")

    def test_bound_context_cannot_shadow_core_fields(self):
        output = io.StringIO()
        logger = StructuredLogger("test", output=output).bind(event="spoofed")

        logger.info("part_burned")

        assert _lines(output)[0]["event"] == "part_burned"

    def test_mirror_to_stdlib(self, caplog):
        logger = StructuredLogger(
            "autoproof.mirror", output=io.StringIO(), mirror_to_stdlib=True
        )

        with caplog.at_level("INFO", logger="autoproof.mirror"):
            logger.warning("transition_denied", "Registry is paused", error_code=103)

        assert len(caplog.records) == 1
        record = caplog.records[0]
        assert record.levelname == "WARNING"
        assert record.getMessage() == "transition_denied Registry is paused"
        assert record.autoproof == {"error_code": 103}


class TestRegistryLogging:

    @pytest.fixture
    def output(self) -> io.StringIO:
        return io.StringIO()

    @pytest.fixture
    def registry(self, output: io.StringIO) -> PartRegistry:
        return PartRegistry(
            config=RegistryConfig(initial_admin=DEFAULT_ADMIN),
            clock=LogicalClock(start=1000),
            structured_logger=StructuredLogger("autoproof.test", output=output),
        )

    def test_accepted_transitions_logged(self, registry: PartRegistry, output: io.StringIO):
        part_id = registry.register_part(DEFAULT_ADMIN, "SN1", "Steel", "FactoryA").unwrap()
        registry.update_part_status(DEFAULT_ADMIN, part_id, "installed")
        registry.transfer_part(DEFAULT_ADMIN, part_id, "ST2")

        records = _lines(output)
        assert [r["event"] for r in records] == [
            "part_registered",
            "part_status_updated",
            "part_transferred",
        ]
        assert records[1]["previous_status"] == "active"
        assert records[2]["new_owner"] == "ST2"
        assert all(r["part_id"] == part_id for r in records)

    def test_denials_logged_as_warnings(self, registry: PartRegistry, output: io.StringIO):
        registry.set_paused("ST2", True)

        record = _lines(output)[0]
        assert record["level"] == "warning"
        assert record["event"] == "transition_denied"
        assert record["action"] == "set_paused"
        assert record["error_code"] == 100
        assert record["error_name"] == "NOT_AUTHORIZED"

    def test_broken_log_stream_does_not_fail_transitions(self):
        output = io.StringIO()
        log = StructuredLogger("autoproof.test", output=output)
        registry = PartRegistry(
            config=RegistryConfig(initial_admin=DEFAULT_ADMIN),
            clock=LogicalClock(start=1000),
            structured_logger=log,
        )
        output.close()

        result = registry.register_part(DEFAULT_ADMIN, "SN1", "Steel", "FactoryA")
        denied = registry.set_paused("ST2", True)

        assert result.ok
        assert denied.error == 100
        assert registry.get_total_parts() == 1
        assert [a.decision for a in registry.attestation_store.all()] == ["allowed", "denied"]
        assert log.dropped == 2
