"""Mock: probe 回應文字（CLI ping 輸出 / Prometheus exposition）。"""
from __future__ import annotations

import hashlib

from prometheus_client import CollectorRegistry, Gauge, generate_latest

from mock_prober.icmp import PHASES, ProbeResult


def _latency_ms(target: str) -> float:
    """Deterministic 1~5ms latency per target."""
    h = int(hashlib.md5(target.encode()).hexdigest()[:8], 16)
    return round(1.0 + (h % 40) / 10.0, 1)


def ping_output(target: str, reachable: bool, count: int = 3) -> str:
    if not reachable:
        return (
            f"PING {target} ({target}): 56 data bytes\n"
            f"\n"
            f"--- {target} ping statistics ---\n"
            f"{count} packets transmitted, 0 packets received, 100.0% packet loss\n"
        )

    base = _latency_ms(target)
    times = [round(base + (i % 3 - 1) * 0.1, 1) for i in range(count)]
    lines = [f"PING {target} ({target}): 56 data bytes"]
    for seq, t in enumerate(times):
        lines.append(f"64 bytes from {target}: icmp_seq={seq} ttl=64 time={t} ms")
    avg = round(sum(times) / len(times), 1)
    return (
        "\n".join(lines)
        + "\n\n"
        + f"--- {target} ping statistics ---\n"
        + f"{count} packets transmitted, {count} packets received, 0.0% packet loss\n"
        + f"round-trip min/avg/max = {min(times)}/{avg}/{max(times)} ms\n"
    )


def build_registry(result: ProbeResult) -> CollectorRegistry:
    """Per-probe registry, blackbox-exporter style."""
    reg = CollectorRegistry()
    g_phase = Gauge(
        "probe_icmp_duration_seconds",
        "Duration of icmp request by phase",
        ["phase"],
        registry=reg,
    )
    for phase in PHASES:
        g_phase.labels(phase=phase).set(result.phase_durations.get(phase, 0.0))
    g_duration = Gauge(
        "probe_duration_seconds",
        "Returns how long the probe took to complete in seconds",
        registry=reg,
    )
    g_duration.set(result.duration_seconds)
    g_success = Gauge(
        "probe_success",
        "Displays whether or not the probe was a success",
        registry=reg,
    )
    g_success.set(1 if result.success else 0)
    return reg


def metrics_output(result: ProbeResult) -> bytes:
    """Prometheus text exposition for one probe."""
    return generate_latest(build_registry(result))
