"""Simulated target availability for probe pipelines (MTBF / MTTR)."""
from mock_prober.profiles import DEFAULT_PROFILE, FailureProfile, classify
from mock_prober.prober import FakeProber
from mock_prober.rand import SafeRandom
from mock_prober.state import StateStore, TargetState

__all__ = [
    "DEFAULT_PROFILE",
    "FailureProfile",
    "FakeProber",
    "SafeRandom",
    "StateStore",
    "TargetState",
    "classify",
]
