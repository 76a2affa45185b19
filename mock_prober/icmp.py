"""
Fake ICMP probe.

模擬一次 ICMP echo 探測的流程（resolve → setup → rtt），
但不建立 socket、不送出封包；可達性完全由 FakeProber 決定。
"""
from __future__ import annotations

import itertools
import logging
import os
import threading
import time
from dataclasses import dataclass, field

from mock_prober.prober import FakeProber

logger = logging.getLogger(__name__)

PHASES = ("resolve", "setup", "rtt")
ICMP_PAYLOAD = b"Prometheus Blackbox Exporter"

_icmp_id = os.getpid() & 0xFFFF
_seq_counter = itertools.count()
_seq_lock = threading.Lock()


def next_icmp_sequence() -> int:
    """Process-wide ICMP sequence number, wrapping at 16 bits."""
    with _seq_lock:
        return next(_seq_counter) & 0xFFFF


@dataclass
class ProbeResult:
    target: str
    success: bool
    seq: int
    icmp_id: int = _icmp_id
    phase_durations: dict[str, float] = field(default_factory=dict)
    duration_seconds: float = 0.0


def probe_fake_icmp(target: str, prober: FakeProber, ip_protocol: str = "ip4") -> ProbeResult:
    """
    Run one simulated ICMP probe against ``target``.

    No name resolution is done; ``resolve`` is recorded as an empty phase
    so the metrics keep the same shape as a real ICMP probe.
    """
    start = time.perf_counter()
    durations = dict.fromkeys(PHASES, 0.0)

    resolve_start = time.perf_counter()
    logger.info("Resolving target address target=%s ip_protocol=%s", target, ip_protocol)
    durations["resolve"] = time.perf_counter() - resolve_start

    setup_start = time.perf_counter()
    logger.info("Creating socket")
    seq = next_icmp_sequence()
    logger.info(
        "Creating ICMP packet seq=%d id=%d size=%d", seq, _icmp_id, len(ICMP_PAYLOAD),
    )
    durations["setup"] = time.perf_counter() - setup_start

    logger.info("Faking to write out packet")
    rtt_start = time.perf_counter()
    logger.info("Waiting for reply packets")
    success = prober.probe(target)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("%s", prober.describe_down())
    durations["rtt"] = time.perf_counter() - rtt_start

    if success:
        logger.info("Found matching reply packet")
    else:
        logger.info("Timeout reading from socket")

    return ProbeResult(
        target=target,
        success=success,
        seq=seq,
        phase_durations=durations,
        duration_seconds=time.perf_counter() - start,
    )
