"""Root conftest — shared fixtures for all tests."""
from __future__ import annotations

import os

import pytest

from mock_prober.profiles import FailureProfile
from mock_prober.rand import SafeRandom

# Tests must not depend on a developer's .env / local config
os.environ.setdefault("MOCK_PROBER_CONFIG", "config/mock_prober.yaml")
os.environ.setdefault("MOCK_PROBER_SEED", "1234")


class FakeClock:
    """Manually advanced clock (epoch seconds)."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedRandom:
    """Random source returning pre-set values, for exact transition tests."""

    def __init__(self, uniforms=(), gausses=()) -> None:
        self.uniforms = list(uniforms)
        self.gausses = list(gausses)
        self.gauss_calls: list[tuple[float, float]] = []

    def random(self) -> float:
        return self.uniforms.pop(0)

    def gauss(self, mu: float, sigma: float) -> float:
        self.gauss_calls.append((mu, sigma))
        return self.gausses.pop(0) if self.gausses else mu


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rng() -> SafeRandom:
    return SafeRandom(42)


@pytest.fixture
def half_half_rules() -> list[FailureProfile]:
    """MTBF = MTTR = 10s for 192.20.*"""
    return [FailureProfile(pattern=r"192\.20.*", mtbf=10.0, mttr=10.0)]


@pytest.fixture
def scripted_random() -> type[ScriptedRandom]:
    return ScriptedRandom


@pytest.fixture
def clock_factory() -> type[FakeClock]:
    return FakeClock
