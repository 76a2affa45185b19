"""
Target classification — 將 target 對應到故障設定檔 (FailureProfile)。

規則依設定順序比對，第一個符合的規則勝出；
沒有任何規則符合時回傳 DEFAULT_PROFILE（MTTR = 0，永遠可達）。
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FailureProfile:
    """Immutable failure parameters for a class of targets.

    mtbf / mttr are durations in seconds.
    """

    pattern: str
    mtbf: float
    mttr: float

    @property
    def always_up(self) -> bool:
        """MTTR <= 0 means the target never fails, regardless of MTBF."""
        return self.mttr <= 0

    @property
    def availability(self) -> float:
        """Steady-state probability of being up: MTBF / (MTBF + MTTR)."""
        if self.always_up:
            return 1.0
        total = self.mtbf + self.mttr
        if total <= 0:
            return 0.0
        return max(0.0, self.mtbf) / total


DEFAULT_PROFILE = FailureProfile(pattern="", mtbf=1.0, mttr=0.0)


@lru_cache(maxsize=1024)
def _compile(pattern: str) -> re.Pattern[str] | None:
    try:
        return re.compile(pattern)
    except re.error as e:
        logger.debug("Invalid pattern %r ignored: %s", pattern, e)
        return None


def matches(pattern: str, target: str) -> bool:
    """Unanchored regex search; malformed patterns never match."""
    compiled = _compile(pattern)
    if compiled is None:
        return False
    return compiled.search(target) is not None


def classify(target: str, rules: Sequence[FailureProfile]) -> FailureProfile:
    """
    回傳第一個 pattern 符合 target 的設定檔。

    Args:
        target: 目標識別字串（通常是 IP 或 hostname）
        rules: 依優先順序排列的 FailureProfile

    Returns:
        符合的 FailureProfile，或 DEFAULT_PROFILE
    """
    for rule in rules:
        matched = matches(rule.pattern, target)
        logger.debug(
            "pattern=%s target=%s matched=%s", rule.pattern, target, matched,
        )
        if matched:
            return rule
    return DEFAULT_PROFILE
