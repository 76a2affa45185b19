"""
Availability state store.

每個曾被查詢過的 target 對應一筆 TargetState，第一次查詢時才建立，
之後在 process 生命週期內永不清除。
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from mock_prober.profiles import FailureProfile
from mock_prober.transition import RandomSource, initialize

logger = logging.getLogger(__name__)


@dataclass
class TargetState:
    """Live simulation state of one target."""

    target: str
    is_up: bool
    state_start: float
    profile: FailureProfile
    recovery_deadline: float | None = None
    checked_at: float = 0.0
    lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False,
    )

    def remaining(self, now: float) -> float:
        """Seconds until recovery (0 when up or already due)."""
        deadline = self.recovery_deadline
        if self.is_up or deadline is None:
            return 0.0
        return max(0.0, deadline - now)

    def __str__(self) -> str:
        status = "Good" if self.is_up else "Bad"
        return f"{status} since {self.state_start:.3f}"


class StateStore:
    """
    Process-scoped table of TargetState keyed by target.

    Creation is serialized by a store-wide lock; each entry carries its
    own lock so transitions on different targets never block each other.
    """

    def __init__(self, rng: RandomSource) -> None:
        self._rng = rng
        self._states: dict[str, TargetState] = {}
        self._lock = threading.Lock()

    def get(self, target: str) -> TargetState | None:
        return self._states.get(target)

    def get_or_create(
        self,
        target: str,
        profile: FailureProfile,
        now: float,
    ) -> tuple[TargetState, bool]:
        """
        回傳 (state, created)。

        已存在時原封不動回傳，傳入的 profile 被忽略（分類只在第一次決定）。
        新建時依 MTBF / (MTBF + MTTR) 抽樣初始 is_up；
        初始為 down 時同時抽樣 recovery_deadline。
        """
        existing = self._states.get(target)
        if existing is not None:
            return existing, False

        with self._lock:
            existing = self._states.get(target)
            if existing is not None:
                return existing, False

            state = TargetState(
                target=target, is_up=True, state_start=now, profile=profile,
            )
            initialize(state, now, self._rng)
            self._states[target] = state

        logger.debug(
            "New target %s (pattern=%r mtbf=%s mttr=%s) is_up=%s",
            target, profile.pattern, profile.mtbf, profile.mttr, state.is_up,
        )
        return state, True

    def values(self) -> list[TargetState]:
        with self._lock:
            return list(self._states.values())

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, target: object) -> bool:
        return target in self._states
