"""
Pytest Configuration and Shared Fixtures

Provides reusable test fixtures for all test modules:
- Issuer documents at different pipeline stages
- Fast mock issuer services
- Temporary config files
"""

import os
import sys
from typing import Any, Dict, List

import pytest
import structlog

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ISSUERS.Enrichment.mock_service import MockIssuerService


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any structlog configuration made by a test (e.g. by main())."""
    yield
    structlog.reset_defaults()


# ============================================================================
# Document Fixtures
# ============================================================================

def _issuers(count: int) -> List[Dict[str, Any]]:
    return [{"id": issuer_id, "isins": None, "type": None} for issuer_id in range(1, count + 1)]


@pytest.fixture
def make_issuers():
    """Factory fixture for fresh, unenriched issuer records."""
    return _issuers


@pytest.fixture
def valid_document() -> Dict[str, Any]:
    """Loaded document, not yet enriched."""
    return {
        "document_id": "DOC-20261017T101500Z-1a2b3c4d",
        "market_sector": ["Provinces and Municipalities"],
        "issuers": _issuers(11),
        "timeline": [],
    }


@pytest.fixture
def valid_enriched_document() -> Dict[str, Any]:
    """Document after enrichment, with one failed issuer."""
    issuers = [
        {"id": 1, "isins": ["XS0000001015", "XS0000001023"], "type": "Municipality"},
        {"id": 2, "isins": None, "type": None},
        {"id": 3, "isins": ["XS0000003011", "XS0000003029"], "type": "Municipality"},
    ]
    return {
        "document_id": "DOC-20261017T101500Z-1a2b3c4d",
        "market_sector": ["Provinces and Municipalities"],
        "issuers": issuers,
        "timeline": [
            {"stage": "ingest", "ts": "2026-10-17T10:15:00Z", "details": "Document loaded: 3 issuers"},
            {"stage": "enrich", "ts": "2026-10-17T10:15:01Z", "details": "Enriched 2/3, failed 1"},
        ],
        "enrichment": {
            "summary": {"total": 3, "succeeded": 2, "failed": 1},
            "failures": [{"id": 2, "reason": "issuer service responded with status 503", "status": 503}],
            "max_workers": 8,
            "elapsed_seconds": 1.002,
        },
    }


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def instant_service() -> MockIssuerService:
    """Mock issuer service with no latency and no failures."""
    return MockIssuerService(latency_seconds=0)


@pytest.fixture
def make_service():
    """Factory fixture for mock services with custom latency/failures."""
    def _make(latency_seconds: float = 0, failing_ids=None) -> MockIssuerService:
        return MockIssuerService(latency_seconds=latency_seconds, failing_ids=failing_ids)
    return _make


# ============================================================================
# Config Fixtures
# ============================================================================

@pytest.fixture
def temp_config_file(tmp_path):
    """Temporary enrichment config.yml."""
    config_yml = tmp_path / "config.yml"
    config_yml.write_text("""
pool:
  max_workers: 4
service:
  base_url: "https://mock.test"
  latency_seconds: 0.01
  failing_ids: [5]
  failure_status: 500
  isins_per_issuer: 3
  country_code: "DE"
classification:
  default: "Corporate"
  rules:
    - sector: "Sovereign"
      label: "Sovereign"
    - sector: "Supranational"
      label: "Supranational"
logging:
  level: "debug"
  format: "json"
""")
    yield str(config_yml)


@pytest.fixture
def create_temp_document_file(tmp_path):
    """Factory fixture to create temporary document JSON files."""
    def _create_file(document: Any, filename: str = "document.json") -> str:
        import json
        file_path = tmp_path / filename
        file_path.write_text(json.dumps(document, indent=2))
        return str(file_path)
    return _create_file
