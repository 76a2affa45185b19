"""Tests for mock_prober.icmp and mock_prober.generators."""
from mock_prober.generators import build_registry, metrics_output, ping_output
from mock_prober.icmp import PHASES, ProbeResult, probe_fake_icmp
from mock_prober.prober import FakeProber
from mock_prober.profiles import FailureProfile


class TestPingOutput:
    def test_reachable(self):
        output = ping_output("10.0.0.1", True)
        assert "3 packets transmitted, 3 packets received, 0.0% packet loss" in output
        assert output.count("icmp_seq=") == 3
        assert "round-trip min/avg/max" in output

    def test_unreachable(self):
        output = ping_output("10.0.0.1", False)
        assert "100.0% packet loss" in output
        assert "icmp_seq" not in output

    def test_deterministic_latency(self):
        assert ping_output("10.0.0.7", True) == ping_output("10.0.0.7", True)


class TestMetricsOutput:
    def test_success(self):
        result = ProbeResult(
            target="10.0.0.1",
            success=True,
            seq=1,
            phase_durations={"resolve": 0.0, "setup": 0.001, "rtt": 0.002},
            duration_seconds=0.003,
        )
        output = metrics_output(result).decode()
        assert "# TYPE probe_success gauge" in output
        assert "probe_success 1.0" in output
        assert 'probe_icmp_duration_seconds{phase="setup"} 0.001' in output
        assert "probe_duration_seconds 0.003" in output

    def test_failure_and_missing_phases(self):
        result = ProbeResult(target="t", success=False, seq=0)
        output = metrics_output(result).decode()
        assert "probe_success 0.0" in output
        for phase in PHASES:
            assert f'probe_icmp_duration_seconds{{phase="{phase}"}} 0.0' in output

    def test_fresh_registry_per_result(self):
        ok = ProbeResult(target="a", success=True, seq=0)
        failed = ProbeResult(target="b", success=False, seq=1)
        assert build_registry(ok).get_sample_value("probe_success") == 1.0
        assert build_registry(failed).get_sample_value("probe_success") == 0.0
        assert build_registry(ok).get_sample_value(
            "probe_icmp_duration_seconds", {"phase": "rtt"},
        ) == 0.0


class TestProbeFakeIcmp:
    def test_always_up_target(self, rng):
        result = probe_fake_icmp("192.100.1.1", FakeProber(rng=rng))
        assert result.success is True
        assert set(result.phase_durations) == set(PHASES)
        assert result.duration_seconds >= 0.0

    def test_sequence_increments(self, rng):
        prober = FakeProber(rng=rng)
        first = probe_fake_icmp("a", prober)
        second = probe_fake_icmp("a", prober)
        assert second.seq == (first.seq + 1) & 0xFFFF

    def test_failure_reported(self, scripted_random):
        rng = scripted_random(uniforms=[0.9], gausses=[30.0])
        prober = FakeProber([FailureProfile(".*", 10.0, 10.0)], rng=rng)
        assert probe_fake_icmp("10.0.0.1", prober).success is False
