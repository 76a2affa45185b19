"""
Stochastic transition engine — 決定目標狀態延續或翻轉。

採用 recovery-timestamp 模型，並在每次查詢時把 up/down 更新過程
從上次檢查時間 (checked_at) 推進到 now：
- down 且尚未到達 recovery_deadline：維持 down，不重新抽樣
- down 且已超過 recovery_deadline：於 deadline 當下恢復為 up，
  並在同一次呼叫繼續 up 分支
- up：從 t 起抽樣故障時間 ~ Exp(MTBF)；落在 (t, now] 之內即轉為 down，
  修復時間 ~ Normal(MTTR, MTTR / 5)，負值截為 0

up 時間為指數分布（無記憶性），down 時間由 deadline 決定，
因此長期 up 比例收斂到 MTBF / (MTBF + MTTR)，與查詢頻率無關。
"""
from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from mock_prober.state import TargetState

logger = logging.getLogger(__name__)

# Normal(mu, mu / REPAIR_SIGMA_DIVISOR)
REPAIR_SIGMA_DIVISOR = 5.0

# Failure/repair cycles replayed per call before falling back to a
# steady-state draw (long idle gaps on short-cycle profiles).
MAX_CATCH_UP = 1000


class RandomSource(Protocol):
    def random(self) -> float: ...

    def gauss(self, mu: float, sigma: float) -> float: ...


def sample_repair_duration(mttr: float, rng: RandomSource) -> float:
    """Repair time in seconds drawn from Normal(mttr, mttr/5), clamped at 0."""
    if mttr <= 0:
        return 0.0
    return max(0.0, rng.gauss(mttr, mttr / REPAIR_SIGMA_DIVISOR))


def sample_time_to_failure(mtbf: float, rng: RandomSource) -> float:
    """Up time in seconds drawn from Exp(mean=mtbf); 0 when mtbf <= 0."""
    if mtbf <= 0:
        return 0.0
    return -mtbf * math.log(1.0 - rng.random())


def mark_down(state: TargetState, at: float, rng: RandomSource) -> None:
    """Put ``state`` into the down state at ``at`` with a sampled deadline."""
    repair = sample_repair_duration(state.profile.mttr, rng)
    state.is_up = False
    state.state_start = at
    state.recovery_deadline = at + repair
    logger.debug(
        "target=%s down at %.3f, repair=%.3fs deadline=%.3f",
        state.target, at, repair, state.recovery_deadline,
    )


def recover(state: TargetState, at: float) -> None:
    state.is_up = True
    state.state_start = at
    state.recovery_deadline = None


def initialize(state: TargetState, now: float, rng: RandomSource) -> None:
    """Draw is-up against MTBF / (MTBF + MTTR); down states get a deadline."""
    if state.profile.always_up or rng.random() < state.profile.availability:
        recover(state, now)
    else:
        mark_down(state, now, rng)
    state.checked_at = now


def advance(state: TargetState, now: float, rng: RandomSource) -> bool:
    """
    Advance ``state`` to ``now`` and return the resulting is-up flag.

    Caller must hold ``state.lock``.
    """
    profile = state.profile
    if profile.always_up:
        if not state.is_up:
            recover(state, now)
        state.checked_at = max(state.checked_at, now)
        return True

    t = state.checked_at
    for _ in range(MAX_CATCH_UP):
        if not state.is_up:
            deadline = state.recovery_deadline
            if deadline is not None and now < deadline:
                break
            t = now if deadline is None else deadline
            recover(state, t)
            logger.debug("target=%s recovered at %.3f", state.target, t)

        if t >= now:
            break
        failure_at = t + sample_time_to_failure(profile.mtbf, rng)
        if failure_at > now:
            break
        mark_down(state, failure_at, rng)
        t = failure_at
    else:
        logger.debug(
            "target=%s idle for too many cycles, redrawing steady state",
            state.target,
        )
        initialize(state, now, rng)

    state.checked_at = max(state.checked_at, now)
    return state.is_up
