"""
Timeline Manager

Purpose: Maintain a per-document timeline of processing stages.

Stages supported, in order: ingest, enrich, report
"""

from __future__ import annotations
from typing import Any, Dict, List
from datetime import datetime, timezone

__all__ = ["TimelineManager", "TIMELINE_STAGES"]

TIMELINE_STAGES = ("ingest", "enrich", "report")


class TimelineManager:
	"""Manage timeline lifecycle for documents."""

	def __init__(self) -> None:
		self._iso_format = "%Y-%m-%dT%H:%M:%SZ"

	def _now(self) -> str:
		return datetime.now(timezone.utc).strftime(self._iso_format)

	def initialize(self, document: Dict[str, Any]) -> Dict[str, Any]:
		"""Ensure document has a timeline list."""
		if not isinstance(document, dict):
			raise ValueError("document must be a dictionary to initialize timeline")
		if not isinstance(document.get("timeline"), list):
			document["timeline"] = []
		return document

	def add_entry(self, document: Dict[str, Any], stage: str, details: str) -> Dict[str, Any]:
		"""Append a timeline entry with validation."""
		if not isinstance(document, dict):
			raise ValueError("document must be a dictionary when adding timeline entries")
		if stage not in TIMELINE_STAGES:
			raise ValueError(f"stage must be one of {list(TIMELINE_STAGES)}")
		if not isinstance(details, str) or not details.strip():
			raise ValueError("details must be a non-empty string")

		self.initialize(document)
		document["timeline"].append({"stage": stage, "ts": self._now(), "details": details.strip()})
		return document

	def validate(self, document: Dict[str, Any]) -> None:
		"""Validate timeline structure for export."""
		timeline = document.get("timeline") if isinstance(document, dict) else None
		if timeline is None:
			raise ValueError("timeline missing from document")
		if not isinstance(timeline, list):
			raise ValueError("timeline must be a list")

		prev = -1
		for entry in timeline:
			if not isinstance(entry, dict):
				raise ValueError("each timeline entry must be a dict")
			stage = entry.get("stage")
			if stage not in TIMELINE_STAGES:
				raise ValueError("timeline entry stage invalid")
			for key in ("ts", "details"):
				value = entry.get(key)
				if not isinstance(value, str) or not value.strip():
					raise ValueError(f"timeline entry {key} must be a non-empty string")

			stage_idx = TIMELINE_STAGES.index(stage)
			if stage_idx < prev:
				raise ValueError("timeline stages appear out of order")
			prev = stage_idx

	def get(self, document: Dict[str, Any]) -> List[Dict[str, Any]]:
		"""Return timeline list or empty list if missing."""
		if not isinstance(document, dict):
			return []
		timeline = document.get("timeline")
		return timeline if isinstance(timeline, list) else []
