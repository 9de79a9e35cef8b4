"""
Markdown Summary Renderer

Purpose: Generate a human-readable Markdown summary of an enrichment run.

Responsibilities:
- Transform extracted document data into template-friendly format
- Load and render Jinja2 templates
- Write Markdown summaries to out/summaries/<document_id>.md

Design notes:
- Reuses DocumentDataExtractor from document_exporter
- Inline template fallback if the template file is missing
"""

import os
from datetime import datetime, timezone
from typing import Any, Dict, List

import structlog
from jinja2 import Environment, FileSystemLoader, Template, select_autoescape

from ISSUERS.Reporting.document_exporter import DocumentDataExtractor

__all__ = ["render_summary", "SummaryDataTransformer", "MarkdownTemplateLoader"]

logger = structlog.get_logger()

TEMPLATE_FILE = "enrichment_summary.md.j2"


class SummaryDataTransformer:
	"""Transform extracted document data into template-ready format."""

	def __init__(self, extracted_data: Dict[str, Any]) -> None:
		self._data = extracted_data

	def transform_issuers_table(self) -> List[Dict[str, Any]]:
		result = []
		for record in self._data.get("issuers", []):
			isins = record.get("isins")
			result.append({
				"id": record.get("id"),
				"type": record.get("type") or "-",
				"isins": ", ".join(isins) if isinstance(isins, list) and isins else "-",
			})
		return result

	def transform(self) -> Dict[str, Any]:
		"""Transform all data into template context."""
		enrichment = self._data.get("enrichment", {})
		return {
			"document_id": self._data.get("document_id", ""),
			"market_sector": self._data.get("market_sector", []),
			"issuers": self.transform_issuers_table(),
			"summary": enrichment.get("summary", {}),
			"failures": enrichment.get("failures", []),
			"max_workers": enrichment.get("max_workers"),
			"elapsed_seconds": enrichment.get("elapsed_seconds"),
			"timeline": self._data.get("timeline", []),
			"summary_generated_at": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
		}


class MarkdownTemplateLoader:
	"""Load Jinja2 templates for Markdown rendering."""

	def __init__(self, template_dir: str = None) -> None:
		self._template_dir = template_dir or os.path.join(os.path.dirname(__file__), "templates")

	def _create_inline_fallback(self) -> str:
		return """# Enrichment Summary: {{ document_id }}

Generated: {{ summary_generated_at }}

- Issuers: {{ summary.total }}
- Enriched: {{ summary.succeeded }}
- Failed: {{ summary.failed }}
"""

	def load_template(self) -> Template:
		"""Load Jinja2 template from file or use inline fallback."""
		env_options = dict(
			autoescape=select_autoescape(['html', 'xml']),
			trim_blocks=True,
			lstrip_blocks=True,
		)
		if os.path.isfile(os.path.join(self._template_dir, TEMPLATE_FILE)):
			env = Environment(loader=FileSystemLoader(self._template_dir), **env_options)
			return env.get_template(TEMPLATE_FILE)

		return Environment(**env_options).from_string(self._create_inline_fallback())


def render_summary(document: Dict[str, Any], output_dir: str, template_dir: str = None) -> bool:
	"""
	Render a Markdown summary of an enriched document.

	Args:
		document: Document after the enrich() stage
		output_dir: Base output directory (e.g., "out")
		template_dir: Override for the templates directory

	Returns:
		True if rendering succeeded, False otherwise
	"""
	try:
		extracted = DocumentDataExtractor().extract(document)
		context = SummaryDataTransformer(extracted).transform()
		markdown_content = MarkdownTemplateLoader(template_dir).load_template().render(**context)

		summaries_dir = os.path.join(output_dir, "summaries")
		os.makedirs(summaries_dir, exist_ok=True)

		file_path = os.path.join(summaries_dir, f"{context['document_id']}.md")
		with open(file_path, "w", encoding="utf-8") as f:
			f.write(markdown_content)

		logger.info("summary_rendered", path=file_path)
		return True

	except (ValueError, OSError) as e:
		logger.error("summary_render_failed", error=str(e))
		return False
