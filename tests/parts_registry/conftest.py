"""
Registry Test Fixtures — Shared infrastructure for registry tests.

Provides:
    - Isolated registry instances on a deterministic logical clock
    - Captured structured log output
    - Part setup helpers
    - Concurrency helpers
"""

from __future__ import annotations

import io
import json
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Callable

import pytest

from autoproof.config import DEFAULT_ADMIN, DEFAULT_NULL_IDENTITY, RegistryConfig
from autoproof.monitoring import LogLevel, StructuredLogger
from autoproof.registry import LogicalClock, PartRegistry


ADMIN = DEFAULT_ADMIN
ALICE = "ST2CY5V39NHDPWSXMW9QDT3HC3GD6Q6XX4CFRK9AG"
BOB = "ST2JHG361ZXG51QTKY2NQCVBPPRRE2KZB1HR05NNC"
NULL = DEFAULT_NULL_IDENTITY

START_TIME = 1000


# =============================================================================
# Test Harness
# =============================================================================

@dataclass
class RegistryTestHarness:
    """
    Test harness for registry tests.

    Provides:
    - Isolated registry instances (never read from the environment)
    - A logical clock the test advances explicitly
    - Captured JSON log lines
    """

    start_time: int = START_TIME

    _registry: PartRegistry | None = field(default=None, init=False)
    _clock: LogicalClock | None = field(default=None, init=False)
    _log_output: io.StringIO = field(default_factory=io.StringIO, init=False)

    def create_registry(self, **config_kwargs: Any) -> PartRegistry:
        """Create an isolated registry with an explicit config."""
        config_kwargs.setdefault("initial_admin", ADMIN)
        config_kwargs.setdefault("null_identity", NULL)
        config_kwargs.setdefault("start_paused", False)
        config_kwargs.setdefault("log_level", "info")

        self._clock = LogicalClock(start=self.start_time)
        self._log_output = io.StringIO()
        self._registry = PartRegistry(
            config=RegistryConfig(**config_kwargs),
            clock=self._clock,
            structured_logger=StructuredLogger(
                name="autoproof.test",
                level=LogLevel.DEBUG,
                output=self._log_output,
            ),
        )
        return self._registry

    @property
    def registry(self) -> PartRegistry:
        if self._registry is None:
            self.create_registry()
        return self._registry

    @property
    def clock(self) -> LogicalClock:
        if self._clock is None:
            self.create_registry()
        return self._clock

    def register_part(
        self,
        serial_number: str = "SN123456",
        material_spec: str = "Aluminum-Alloy",
        origin_factory: str = "FactoryA",
    ) -> int:
        """Register a part as admin and return its id."""
        return self.registry.register_part(
            self.registry.get_admin(), serial_number, material_spec, origin_factory
        ).unwrap()

    def register_owned_by(self, owner: str, **kwargs: Any) -> int:
        """Register a part and hand it to ``owner``."""
        part_id = self.register_part(**kwargs)
        if owner != self.registry.get_admin():
            self.registry.transfer_part(self.registry.get_admin(), part_id, owner).unwrap()
        return part_id

    def log_records(self) -> list[dict[str, Any]]:
        """Structured log lines emitted so far."""
        return [
            json.loads(line)
            for line in self._log_output.getvalue().splitlines()
            if line.strip()
        ]


# =============================================================================
# Concurrency Helpers
# =============================================================================

def parallel(
    operations: list[Callable[[], Any]],
    max_workers: int = 8,
) -> list[Any]:
    """
    Execute operations in parallel and collect results.

    Returns results in the same order as operations.
    """
    results = [None] * len(operations)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(op): i
            for i, op in enumerate(operations)
        }

        for future in as_completed(futures):
            idx = futures[future]
            try:
                results[idx] = future.result()
            except Exception as e:
                results[idx] = e

    return results


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def harness() -> RegistryTestHarness:
    """Create an isolated test harness."""
    return RegistryTestHarness()


@pytest.fixture
def registry(harness: RegistryTestHarness) -> PartRegistry:
    """Create an isolated registry instance."""
    return harness.create_registry()


@pytest.fixture
def clock(harness: RegistryTestHarness, registry: PartRegistry) -> LogicalClock:
    return harness.clock


@pytest.fixture
def admin() -> str:
    return ADMIN


@pytest.fixture
def alice() -> str:
    return ALICE


@pytest.fixture
def bob() -> str:
    return BOB


@pytest.fixture
def registered_part(harness: RegistryTestHarness, registry: PartRegistry) -> int:
    """A freshly registered part still held by the admin."""
    return harness.register_part()
