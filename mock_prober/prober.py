"""
Fake prober — 取代真實網路探測的可用性模擬器。

``FakeProber.probe(target)`` 是唯一必要的入口：
第一次見到 target 時分類並建立狀態（回傳初始抽樣結果），
之後每次呼叫交由 transition engine 決定狀態延續或翻轉。
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Sequence

from mock_prober.profiles import FailureProfile, classify
from mock_prober.rand import SafeRandom
from mock_prober.state import StateStore, TargetState
from mock_prober.transition import RandomSource, advance

logger = logging.getLogger(__name__)


class FakeProber:
    """
    Simulated reachability for a set of classification rules.

    Each instance owns its own StateStore, so tests and service replicas
    stay isolated. ``clock`` returns epoch seconds; ``rng`` must be safe
    for concurrent use (see SafeRandom).
    """

    def __init__(
        self,
        rules: Sequence[FailureProfile] = (),
        rng: RandomSource | None = None,
        clock: Callable[[], float] = time.time,
        store: StateStore | None = None,
    ) -> None:
        self.rules: tuple[FailureProfile, ...] = tuple(rules)
        self.rng = rng if rng is not None else SafeRandom()
        self.clock = clock
        self.store = store if store is not None else StateStore(self.rng)

    def probe(
        self,
        target: str,
        rules: Sequence[FailureProfile] | None = None,
    ) -> bool:
        """
        Return True for simulated success, False for simulated failure.

        ``rules`` overrides the configured rules, but only matters the
        first time ``target`` is seen.
        """
        now = self.clock()
        state = self.store.get(target)
        if state is None:
            profile = classify(target, self.rules if rules is None else rules)
            state, created = self.store.get_or_create(target, profile, now)
            if created:
                logger.debug("target=%s currentStatus=%s", target, state)
                return state.is_up

        with state.lock:
            is_up = advance(state, now, self.rng)
        logger.debug("target=%s currentStatus=%s", target, state)
        return is_up

    def down_targets(self) -> list[TargetState]:
        return [s for s in self.store.values() if not s.is_up]

    def describe_down(self) -> str:
        """
        Human-readable summary of down targets and remaining repair time.

        For logging and debugging only.
        """
        targets = self.snapshot()
        down = [t for t in targets if not t["is_up"]]
        if not down:
            return f"all {len(targets)} targets up"
        lines = [f"{len(down)}/{len(targets)} targets down:"]
        for t in down:
            lines.append(
                f"  {t['target']}: down {t['state_seconds']:.1f}s, "
                f"recovers in {t['recovers_in']:.1f}s (pattern={t['pattern']!r})"
            )
        return "\n".join(lines)

    def snapshot(self) -> list[dict[str, Any]]:
        """每個 target 的目前狀態，供 /status 使用。"""
        now = self.clock()
        result = []
        for s in sorted(self.store.values(), key=lambda s: s.target):
            with s.lock:
                result.append({
                    "target": s.target,
                    "is_up": s.is_up,
                    "pattern": s.profile.pattern,
                    "mtbf": s.profile.mtbf,
                    "mttr": s.profile.mttr,
                    "state_seconds": round(now - s.state_start, 3),
                    "recovers_in": None if s.is_up else round(s.remaining(now), 3),
                })
        return result
