'''
Console Rendering

Purpose: Print the issuer collection before and after enrichment.
'''

from typing import Any, Dict, List

__all__ = ["render_issuers_table"]

_HEADERS = ("id", "type", "isins")


def _cell(value: Any) -> str:
	if value is None:
		return "-"
	if isinstance(value, list):
		return ", ".join(str(v) for v in value) if value else "-"
	return str(value)


def render_issuers_table(issuers: List[Dict[str, Any]]) -> str:
	"""Render issuer records as a fixed-width text table."""
	rows = [
		(_cell(record.get("id")), _cell(record.get("type")), _cell(record.get("isins")))
		for record in issuers
		if isinstance(record, dict)
	]

	widths = [len(h) for h in _HEADERS]
	for row in rows:
		widths = [max(w, len(cell)) for w, cell in zip(widths, row)]

	def _line(cells) -> str:
		return "  ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()

	lines = [_line(_HEADERS), _line("-" * w for w in widths)]
	lines.extend(_line(row) for row in rows)
	return "\n".join(lines)
