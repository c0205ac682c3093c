"""Pytest fixtures for backend tests."""
from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient

from app.logic.engine import SlotEngine
from app.logic.rng import RNGBase, SeededRNG
from app.main import app
from app.telemetry import telemetry_service


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (large-N statistical checks)"
    )


class ScriptedRNG(RNGBase):
    """
    RNG that replays fixed values and records every draw.

    random() pops from `floats`, randbelow() pops from `ints`. Running
    out of scripted values fails the test loudly.
    """

    def __init__(self, floats: list[float] | None = None, ints: list[int] | None = None):
        self._floats = list(floats or [])
        self._ints = list(ints or [])
        self.calls: list[tuple[str, Any]] = []

    def random(self) -> float:
        self.calls.append(("random", None))
        if not self._floats:
            raise AssertionError("ScriptedRNG ran out of floats")
        return self._floats.pop(0)

    def randbelow(self, n: int) -> int:
        self.calls.append(("randbelow", n))
        if not self._ints:
            raise AssertionError("ScriptedRNG ran out of ints")
        value = self._ints.pop(0)
        assert 0 <= value < n, f"scripted int {value} out of range [0, {n})"
        return value


class RecordingSink:
    """Telemetry sink that keeps emitted events in memory."""

    def __init__(self):
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        self.events.append((event_name, data))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


@pytest.fixture
def scripted_rng() -> ScriptedRNG:
    """Empty scripted RNG: any draw fails the test."""
    return ScriptedRNG()


@pytest.fixture
def seeded_engine() -> SlotEngine:
    """Engine with a fixed seed."""
    return SlotEngine(rng=SeededRNG(seed=12345))


@pytest.fixture
def recording_sink() -> Generator[RecordingSink, None, None]:
    """Swap the global telemetry sink for a recording one."""
    original_sink = telemetry_service._sink
    sink = RecordingSink()
    telemetry_service.set_sink(sink)
    yield sink
    telemetry_service.set_sink(original_sink)


@pytest.fixture
def test_client() -> Generator[TestClient, None, None]:
    """Create TestClient with lifespan."""
    with TestClient(app) as client:
        yield client
