'''
Issuer Enrichment

Purpose: Attach ISINs and a classification label to every issuer of a document.

Responsibilities:
- Fetch each issuer's ISINs from the issuer service, concurrently
- Bound in-flight calls with a fixed-size thread pool
- Derive the issuer classification from the market sector context
- Report per-issuer fetch failures without aborting the others

Design notes:
- One unit of work per issuer; each unit owns exactly one record (by index)
- The market sector context is read-only and shared, so no locks are needed
- Synchronous for the caller: returns after every unit has been collected
- Fire-once: no retries, no per-call timeout
'''

import os
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

import structlog

from ISSUERS.Enrichment.exceptions import FetchFailure
from ISSUERS.Enrichment.mock_service import build_service_from_config
from ISSUERS.Enrichment.rules import EnrichmentConfigLoader, SectorClassifier

__all__ = ["enrich", "enrich_issuers", "UnitOfWork", "UnitOutcome", "UnitState"]

logger = structlog.get_logger()


class UnitState(str, Enum):
	PENDING = "pending"
	DISPATCHED = "dispatched"
	SUCCEEDED = "succeeded"
	FAILED = "failed"
	COLLECTED = "collected"


_TRANSITIONS = {
	UnitState.PENDING: {UnitState.DISPATCHED},
	UnitState.DISPATCHED: {UnitState.SUCCEEDED, UnitState.FAILED},
	UnitState.SUCCEEDED: {UnitState.COLLECTED},
	UnitState.FAILED: {UnitState.COLLECTED},
	UnitState.COLLECTED: set(),
}


@dataclass
class UnitOutcome:
	"""Result of one unit of work: fetched values or the fetch failure."""

	index: int
	issuer_id: int
	status: UnitState
	isins: Optional[List[str]] = None
	type: Optional[str] = None
	error: Optional[FetchFailure] = None

	@property
	def succeeded(self) -> bool:
		return self.status is UnitState.SUCCEEDED


class UnitOfWork:
	"""Track the lifecycle of one issuer's enrichment."""

	def __init__(self, index: int, issuer_id: int) -> None:
		self.index = index
		self.issuer_id = issuer_id
		self.state = UnitState.PENDING
		self.history: List[UnitState] = [UnitState.PENDING]
		self.outcome: Optional[UnitOutcome] = None

	def transition(self, new_state: UnitState) -> None:
		if new_state not in _TRANSITIONS[self.state]:
			raise ValueError(f"illegal unit transition {self.state.value} -> {new_state.value}")
		self.state = new_state
		self.history.append(new_state)

	def succeed(self, isins: List[str], label: str) -> UnitOutcome:
		self.transition(UnitState.SUCCEEDED)
		self.outcome = UnitOutcome(self.index, self.issuer_id, UnitState.SUCCEEDED, isins=isins, type=label)
		return self.outcome

	def fail(self, error: FetchFailure) -> UnitOutcome:
		self.transition(UnitState.FAILED)
		self.outcome = UnitOutcome(self.index, self.issuer_id, UnitState.FAILED, error=error)
		return self.outcome


def _enrich_record(
	record: Dict[str, Any],
	market_sector: Sequence[str],
	fetch: Callable[[int], Any],
	classifier: SectorClassifier,
) -> Dict[str, Any]:
	"""Run one unit of work. The record is written only after the fetch succeeded."""
	isins = fetch(record["id"])
	label = classifier.classify(market_sector)
	record["isins"] = isins
	record["type"] = label
	return {"isins": isins, "type": label}


def _check_max_workers(max_workers: Any) -> int:
	if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
		raise ValueError("max_workers must be a positive integer")
	return max_workers


def enrich_issuers(
	issuers: List[Dict[str, Any]],
	market_sector: Sequence[str],
	fetch: Callable[[int], Any],
	max_workers: int = 8,
	classifier: Optional[SectorClassifier] = None,
) -> List[UnitOutcome]:
	"""
	Enrich issuer records in place using a bounded thread pool.

	Args:
		issuers: Issuer records ({"id", "isins", "type"}); mutated in place, never reordered
		market_sector: Read-only sector context shared by every unit
		fetch: Issuer service capability, fetch(issuer_id) -> isins or raise FetchFailure
		max_workers: Thread pool capacity
		classifier: Classification rules (defaults to the built-in table)

	Returns:
		One UnitOutcome per issuer, in collection order

	Raises:
		ValueError: If max_workers is not a positive integer
		Exception: Anything a unit raises other than FetchFailure, after the pool drained
	"""
	max_workers = _check_max_workers(max_workers)
	if not callable(fetch):
		raise ValueError("fetch must be callable")
	classifier = classifier or SectorClassifier()
	sector = tuple(market_sector or ())

	units = [UnitOfWork(idx, record["id"]) for idx, record in enumerate(issuers)]
	outcomes: List[UnitOutcome] = []

	logger.info("enrichment_started", issuers=len(units), max_workers=max_workers)

	with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="issuer-enrich") as executor:
		futures: Dict[Future, UnitOfWork] = {}
		for unit in units:
			future = executor.submit(_enrich_record, issuers[unit.index], sector, fetch, classifier)
			unit.transition(UnitState.DISPATCHED)
			futures[future] = unit

		for future in as_completed(futures):
			unit = futures[future]
			try:
				values = future.result()
			except FetchFailure as e:
				logger.warning(
					"issuer_fetch_failed",
					issuer_id=unit.issuer_id,
					reason=e.reason,
					status=e.status,
				)
				outcome = unit.fail(e)
			except Exception as e:
				logger.error("issuer_unit_crashed", issuer_id=unit.issuer_id, error=str(e))
				raise
			else:
				logger.debug("unit_succeeded", issuer_id=unit.issuer_id, type=values["type"])
				outcome = unit.succeed(values["isins"], values["type"])
			unit.transition(UnitState.COLLECTED)
			outcomes.append(outcome)

	outcomes.sort(key=lambda o: o.index)
	failed = sum(1 for o in outcomes if not o.succeeded)
	logger.info("enrichment_finished", succeeded=len(outcomes) - failed, failed=failed)
	return outcomes


def _build_config_path() -> str:
	"""Resolve config.yml next to this module."""
	return os.path.join(os.path.dirname(__file__), "config.yml")


_CONFIG_LOADER: Optional[EnrichmentConfigLoader] = None


def _get_config_loader() -> EnrichmentConfigLoader:
	"""Lazy-load a singleton EnrichmentConfigLoader."""
	global _CONFIG_LOADER
	if _CONFIG_LOADER is None:
		_CONFIG_LOADER = EnrichmentConfigLoader(_build_config_path())
	return _CONFIG_LOADER


def _validate_document(document: Dict[str, Any]) -> None:
	"""Strictly validate document structure before enrichment."""
	if not isinstance(document, dict):
		raise ValueError("document must be a dict")

	issuers = document.get("issuers")
	if not isinstance(issuers, list):
		raise ValueError("document must contain an 'issuers' list")

	seen = set()
	for idx, record in enumerate(issuers):
		if not isinstance(record, dict):
			raise ValueError(f"issuers[{idx}] must be a dict")
		issuer_id = record.get("id")
		if isinstance(issuer_id, bool) or not isinstance(issuer_id, int):
			raise ValueError(f"issuers[{idx}]['id'] must be an integer")
		if issuer_id in seen:
			raise ValueError(f"duplicate issuer id: {issuer_id}")
		seen.add(issuer_id)

	market_sector = document.get("market_sector", [])
	if market_sector is None:
		market_sector = []
	if not isinstance(market_sector, list):
		raise ValueError("document['market_sector'] must be a list")
	for label in market_sector:
		if not isinstance(label, str):
			raise ValueError("market sector labels must be strings")


def enrich(
	document: Dict[str, Any],
	service: Any = None,
	max_workers: Optional[int] = None,
	classifier: Optional[SectorClassifier] = None,
) -> Dict[str, Any]:
	"""Enrich a document's issuers in place and attach an enrichment summary."""
	_validate_document(document)
	config = _get_config_loader()

	if service is None:
		service = build_service_from_config(config)
	if max_workers is None:
		max_workers = config.get_max_workers()
	if classifier is None:
		classifier = SectorClassifier.from_config(config)

	started = time.perf_counter()
	outcomes = enrich_issuers(
		document["issuers"],
		document.get("market_sector") or [],
		service.fetch,
		max_workers=max_workers,
		classifier=classifier,
	)
	elapsed = time.perf_counter() - started

	failures = [o.error.to_dict() for o in outcomes if not o.succeeded]
	document["enrichment"] = {
		"summary": {
			"total": len(outcomes),
			"succeeded": len(outcomes) - len(failures),
			"failed": len(failures),
		},
		"failures": failures,
		"max_workers": max_workers,
		"elapsed_seconds": round(elapsed, 3),
	}
	return document
