"""Thread-safe random source shared by all probes of a prober."""
from __future__ import annotations

import random
import threading


class SafeRandom:
    """
    Lock-protected wrapper around ``random.Random``.

    ``random.Random.gauss`` keeps hidden state between calls and is not
    safe to share across threads, so every draw goes through one lock.
    Pass ``seed`` for reproducible runs; ``None`` seeds from OS entropy.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)
        self._lock = threading.Lock()
        self.seed = seed

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        with self._lock:
            return self._rng.random()

    def gauss(self, mu: float, sigma: float) -> float:
        with self._lock:
            return self._rng.gauss(mu, sigma)
