"""
I/O-bound timing demo: sequential calls against the bounded thread pool.

Serial waits add up; the pool overlaps them, so wall time drops to roughly
ceil(N / max_workers) * latency.
"""

import time
from typing import Any, Dict, List

from ISSUERS.Enrichment.enricher import enrich_issuers, _check_max_workers
from ISSUERS.Enrichment.mock_service import MockIssuerService
from ISSUERS.Enrichment.rules import SectorClassifier

__all__ = ["compare_sequential_vs_pooled", "run_sequential"]


def _fresh_issuers(count: int) -> List[Dict[str, Any]]:
	return [{"id": issuer_id, "isins": None, "type": None} for issuer_id in range(1, count + 1)]


def run_sequential(issuers: List[Dict[str, Any]], market_sector: List[str], service: MockIssuerService) -> float:
	"""Enrich one issuer after the other; return elapsed seconds."""
	classifier = SectorClassifier()
	t0 = time.perf_counter()
	for record in issuers:
		record["isins"] = service.fetch(record["id"])
		record["type"] = classifier.classify(market_sector)
	return time.perf_counter() - t0


def compare_sequential_vs_pooled(
	issuer_count: int = 11,
	latency_seconds: float = 0.2,
	max_workers: int = 8,
	market_sector: List[str] = None,
) -> Dict[str, Any]:
	"""Time sequential enrichment against the thread pool over the same mock service."""
	if issuer_count < 1:
		raise ValueError("issuer_count must be a positive integer")
	_check_max_workers(max_workers)
	market_sector = market_sector or []
	service = MockIssuerService(latency_seconds=latency_seconds)

	sequential_s = run_sequential(_fresh_issuers(issuer_count), market_sector, service)

	t0 = time.perf_counter()
	enrich_issuers(_fresh_issuers(issuer_count), market_sector, service.fetch, max_workers=max_workers)
	pooled_s = time.perf_counter() - t0

	return {
		"issuers": issuer_count,
		"latency_seconds": latency_seconds,
		"max_workers": max_workers,
		"sequential_seconds": round(sequential_s, 3),
		"pooled_seconds": round(pooled_s, 3),
		"speedup": round(sequential_s / pooled_s, 2) if pooled_s else None,
	}
