"""
Unit Tests for ISSUERS/Reporting/document_exporter.py

Tests document JSON export, data extraction, and validation.
"""

import pytest
import os
import sys
import json

from structlog.testing import capture_logs

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ISSUERS.Reporting.document_exporter import DocumentDataExtractor, export_document


class TestDocumentDataExtractorValidation:
    """Test suite for DocumentDataExtractor validation."""

    def test_valid_document_passes(self, valid_enriched_document):
        DocumentDataExtractor()._validate_input(valid_enriched_document)

    def test_non_dict_raises(self):
        with pytest.raises(ValueError, match="document must be a dictionary"):
            DocumentDataExtractor()._validate_input("not a dict")

    @pytest.mark.parametrize("field", ["document_id", "issuers", "enrichment"])
    def test_missing_field_raises(self, valid_enriched_document, field):
        del valid_enriched_document[field]
        with pytest.raises(ValueError, match=f"missing required field: '{field}'"):
            DocumentDataExtractor()._validate_input(valid_enriched_document)

    @pytest.mark.parametrize("document_id", ["", "../escape", "a/b", "bad id", "-leading", "DOC-1\n"])
    def test_invalid_document_id_raises(self, valid_enriched_document, document_id):
        valid_enriched_document["document_id"] = document_id
        with pytest.raises(ValueError, match="document_id has invalid format"):
            DocumentDataExtractor()._validate_input(valid_enriched_document)

    @pytest.mark.parametrize("document_id", ["issuers-2026-q3", "INC-20261017T101500Z-1a2b3c4d", "batch_7.v2"])
    def test_custom_filename_safe_id_passes(self, valid_enriched_document, document_id):
        valid_enriched_document["document_id"] = document_id
        DocumentDataExtractor()._validate_input(valid_enriched_document)

    def test_unenriched_document_raises(self, valid_enriched_document):
        valid_enriched_document["enrichment"] = {}
        with pytest.raises(ValueError, match="enrichment must be a dictionary with a summary"):
            DocumentDataExtractor()._validate_input(valid_enriched_document)


class TestDocumentDataExtractorExtract:
    """Test suite for DocumentDataExtractor extraction."""

    def test_extract_issuers_flags_enriched(self, valid_enriched_document):
        issuers = DocumentDataExtractor().extract_issuers(valid_enriched_document)

        assert [i["id"] for i in issuers] == [1, 2, 3]
        assert [i["enriched"] for i in issuers] == [True, False, True]

    def test_extract_enrichment(self, valid_enriched_document):
        enrichment = DocumentDataExtractor().extract_enrichment(valid_enriched_document)

        assert enrichment["summary"] == {"total": 3, "succeeded": 2, "failed": 1}
        assert enrichment["failures"][0]["id"] == 2
        assert enrichment["max_workers"] == 8

    def test_extract_full(self, valid_enriched_document):
        data = DocumentDataExtractor().extract(valid_enriched_document)

        assert list(data.keys()) == ["document_id", "market_sector", "issuers", "enrichment", "timeline"]
        assert data["market_sector"] == ["Provinces and Municipalities"]
        assert len(data["timeline"]) == 2


class TestExportDocument:
    """Test suite for export_document()."""

    def test_export_writes_json(self, valid_enriched_document, tmp_path):
        assert export_document(valid_enriched_document, str(tmp_path)) is True

        path = tmp_path / "documents" / "DOC-20261017T101500Z-1a2b3c4d.json"
        data = json.loads(path.read_text())
        assert data["document_id"] == "DOC-20261017T101500Z-1a2b3c4d"
        assert data["issuers"][0]["isins"] == ["XS0000001015", "XS0000001023"]
        assert data["enrichment"]["summary"]["failed"] == 1

    def test_export_invalid_document_returns_false(self, tmp_path):
        with capture_logs() as logs:
            assert export_document({"issuers": []}, str(tmp_path)) is False

        assert logs[0]["event"] == "document_export_failed"
        assert not (tmp_path / "documents").exists()

    def test_export_overwrites_on_rerun(self, valid_enriched_document, tmp_path):
        export_document(valid_enriched_document, str(tmp_path))
        valid_enriched_document["issuers"][1]["type"] = "Municipality"
        valid_enriched_document["issuers"][1]["isins"] = ["XS0000002011"]
        export_document(valid_enriched_document, str(tmp_path))

        files = list((tmp_path / "documents").iterdir())
        assert len(files) == 1
        assert json.loads(files[0].read_text())["issuers"][1]["enriched"] is True
