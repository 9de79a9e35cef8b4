"""
Document JSON Exporter

Purpose: Export enriched issuer documents to structured JSON files.

Responsibilities:
- Validate and extract document data after enrichment
- Build standardized JSON schema
- Write to out/documents/<document_id>.json

Design notes:
- Stateless export function
- Validates input before writing
- Export errors are logged and reported as False, never raised
"""

import os
import json
from typing import Any, Dict, List

import structlog

from ISSUERS.Ingest.loader import DOCUMENT_ID_PATTERN

__all__ = ["export_document", "DocumentDataExtractor"]

logger = structlog.get_logger()


class DocumentDataExtractor:
	"""Extract and validate document data from an enriched document."""

	def _validate_input(self, document: Dict[str, Any]) -> None:
		"""Validate document structure before extraction."""
		if not isinstance(document, dict):
			raise ValueError("document must be a dictionary")

		for field in ("document_id", "issuers", "enrichment"):
			if field not in document:
				raise ValueError(f"document missing required field: '{field}'")

		document_id = document.get("document_id")
		if not isinstance(document_id, str) or not DOCUMENT_ID_PATTERN.fullmatch(document_id):
			raise ValueError(f"document_id has invalid format: {document_id}")

		if not isinstance(document.get("issuers"), list):
			raise ValueError("issuers must be a list")

		enrichment = document.get("enrichment")
		if not isinstance(enrichment, dict) or not isinstance(enrichment.get("summary"), dict):
			raise ValueError("enrichment must be a dictionary with a summary")

	def extract_issuers(self, document: Dict[str, Any]) -> List[Dict[str, Any]]:
		"""Extract issuers in document order, with an 'enriched' flag."""
		result = []
		for record in document.get("issuers", []):
			if not isinstance(record, dict):
				continue
			isins = record.get("isins")
			result.append({
				"id": record.get("id"),
				"isins": isins,
				"type": record.get("type"),
				"enriched": isinstance(isins, list) and record.get("type") is not None,
			})
		return result

	def extract_enrichment(self, document: Dict[str, Any]) -> Dict[str, Any]:
		enrichment = document.get("enrichment", {})
		summary = enrichment.get("summary", {})
		failures = enrichment.get("failures", [])
		return {
			"summary": {
				"total": int(summary.get("total", 0)),
				"succeeded": int(summary.get("succeeded", 0)),
				"failed": int(summary.get("failed", 0)),
			},
			"failures": failures if isinstance(failures, list) else [],
			"max_workers": enrichment.get("max_workers"),
			"elapsed_seconds": enrichment.get("elapsed_seconds"),
		}

	def extract(self, document: Dict[str, Any]) -> Dict[str, Any]:
		"""Validate and extract all export fields."""
		self._validate_input(document)
		timeline = document.get("timeline", [])
		return {
			"document_id": document["document_id"],
			"market_sector": list(document.get("market_sector") or []),
			"issuers": self.extract_issuers(document),
			"enrichment": self.extract_enrichment(document),
			"timeline": timeline if isinstance(timeline, list) else [],
		}


def export_document(document: Dict[str, Any], output_dir: str) -> bool:
	"""
	Export an enriched document to JSON.

	Args:
		document: Document after the enrich() stage
		output_dir: Base output directory (e.g., "out")

	Returns:
		True if export succeeded, False otherwise
	"""
	try:
		data = DocumentDataExtractor().extract(document)

		documents_dir = os.path.join(output_dir, "documents")
		os.makedirs(documents_dir, exist_ok=True)

		file_path = os.path.join(documents_dir, f"{data['document_id']}.json")
		with open(file_path, "w", encoding="utf-8") as f:
			json.dump(data, f, indent=2, ensure_ascii=False)

		logger.info("document_exported", path=file_path)
		return True

	except (ValueError, OSError) as e:
		logger.error("document_export_failed", error=str(e))
		return False
