"""Smoke test for the flow strategy benchmark."""

from performance.benchmarks.flow import print_report, run_benchmark
from simulation.strategies import STRATEGIES


def test_run_benchmark_times_every_strategy(fake_noise, capsys):
    results = run_benchmark(size=8, passes=2, seed=1, noise=fake_noise)
    assert set(results) == set(STRATEGIES)
    for result in results.values():
        assert len(result.times) == 2
        assert result.stats.mean >= 0.0

    print_report(results, 8)
    out = capsys.readouterr().out
    assert "FLOW STRATEGY BENCHMARK" in out
    assert "fall_vector" in out
