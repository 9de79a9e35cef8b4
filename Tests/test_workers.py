"""
Unit Tests for ISSUERS/Workers

Tests the multiprocessing hello workers and the sequential vs pooled timing demo.
"""

import pytest
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ISSUERS.Enrichment.mock_service import MockIssuerService
from ISSUERS.Workers.hello import greet, run_hello_workers
from ISSUERS.Workers.timing import compare_sequential_vs_pooled, run_sequential


class TestHelloWorkers:
    """Test suite for run_hello_workers()."""

    def test_greet(self):
        assert greet(3).startswith("Hello from worker 3 (pid ")

    def test_messages_in_submission_order(self):
        messages = run_hello_workers(4, processes=2)

        assert len(messages) == 4
        for number, message in enumerate(messages, start=1):
            assert message.startswith(f"Hello from worker {number} ")

    def test_runs_in_child_processes(self):
        messages = run_hello_workers(2, processes=2)
        assert all(f"(pid {os.getpid()})" not in m for m in messages)

    @pytest.mark.parametrize("count", [0, -1, True, 1.5])
    def test_invalid_count_raises(self, count):
        with pytest.raises(ValueError, match="count must be a positive integer"):
            run_hello_workers(count)

    def test_invalid_processes_raises(self):
        with pytest.raises(ValueError, match="processes"):
            run_hello_workers(2, processes=0)


class TestTiming:
    """Test suite for the timing comparison."""

    def test_run_sequential_enriches_all(self, make_issuers):
        issuers = make_issuers(3)
        elapsed = run_sequential(issuers, ["Sovereign"], MockIssuerService(latency_seconds=0))

        assert elapsed >= 0
        assert [r["type"] for r in issuers] == ["Sovereign"] * 3
        assert all(r["isins"] for r in issuers)

    def test_pooled_beats_sequential(self):
        """11 issuers, pool of 8: pooled wall time is well below sequential."""
        result = compare_sequential_vs_pooled(issuer_count=11, latency_seconds=0.05, max_workers=8)

        assert result["issuers"] == 11
        assert result["sequential_seconds"] >= 11 * 0.05 * 0.9
        assert result["pooled_seconds"] < result["sequential_seconds"]
        assert result["speedup"] > 2

    def test_invalid_issuer_count_raises(self):
        with pytest.raises(ValueError, match="issuer_count"):
            compare_sequential_vs_pooled(issuer_count=0)
