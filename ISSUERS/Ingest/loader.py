'''
Document Ingestion

Purpose: Load issuer documents from disk, or provide the built-in sample.

Responsibilities:
- Read document JSON files
- Provide a sample document for demo/testing
- Fill unset enrichment fields and assign a document ID
'''

import copy
import json
import os
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog

__all__ = ["load_document", "SAMPLE_DOCUMENT", "DOCUMENT_ID_PATTERN"]

logger = structlog.get_logger()


# Document ids name the exported files, so they must be filename-safe
DOCUMENT_ID_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]{0,127}")

SAMPLE_DOCUMENT: Dict[str, Any] = {
	"market_sector": ["Provinces and Municipalities"],
	"issuers": [{"id": issuer_id, "isins": None, "type": None} for issuer_id in range(1, 12)],
}


def _generate_document_id() -> str:
	"""
	Generate a unique document ID.

	Format: DOC-<ISO_TIMESTAMP>-<UUID_SHORT>
	Example: DOC-20261017T101500Z-1a2b3c4d
	"""
	iso_timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
	return f"DOC-{iso_timestamp}-{uuid.uuid4().hex[:8]}"


def _prepare(document: Dict[str, Any]) -> Dict[str, Any]:
	if not isinstance(document, dict):
		raise ValueError("document must be a JSON object")
	issuers = document.get("issuers")
	if not isinstance(issuers, list):
		raise ValueError("document must contain an 'issuers' list")

	for record in issuers:
		if isinstance(record, dict):
			record.setdefault("isins", None)
			record.setdefault("type", None)

	if document.get("market_sector") is None:
		document["market_sector"] = []

	document_id = document.get("document_id")
	if not isinstance(document_id, str) or not document_id.strip():
		document["document_id"] = _generate_document_id()
	elif not DOCUMENT_ID_PATTERN.fullmatch(document_id):
		raise ValueError(f"document_id must be filename-safe (letters, digits, '.', '_', '-'): {document_id!r}")
	return document


def load_document(path: Optional[str] = None, use_sample: bool = False) -> Dict[str, Any]:
	"""
	Load an issuer document.

	Args:
		path: Path to a document JSON file
		use_sample: Return a fresh copy of SAMPLE_DOCUMENT instead of reading a file

	Returns:
		Document dict with 'document_id', 'market_sector' and 'issuers'

	Raises:
		ValueError: If neither source is given, or the file is not a valid document
		FileNotFoundError: If path does not exist
	"""
	if use_sample:
		document = _prepare(copy.deepcopy(SAMPLE_DOCUMENT))
		logger.info("document_loaded", source="sample", issuers=len(document["issuers"]))
		return document

	if not path:
		raise ValueError("either a document path or use_sample=True is required")
	if not os.path.isfile(path):
		raise FileNotFoundError(f"Document not found: {path}")

	with open(path, "r", encoding="utf-8") as f:
		try:
			data = json.load(f)
		except json.JSONDecodeError as e:
			raise ValueError(f"Malformed JSON in {path}: {e}")

	document = _prepare(data)
	logger.info("document_loaded", source=path, issuers=len(document["issuers"]))
	return document
