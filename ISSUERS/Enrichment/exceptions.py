"""
Enrichment errors.

A single failure kind reaches the enrichment stage: the issuer service did not
answer with a success payload.
"""

from typing import Optional

__all__ = ["EnrichmentError", "FetchFailure"]


class EnrichmentError(Exception):
	"""Base class for enrichment errors."""


class FetchFailure(EnrichmentError):
	"""The issuer service call for one issuer did not succeed."""

	def __init__(self, issuer_id: int, reason: str, status: Optional[int] = None) -> None:
		self.issuer_id = issuer_id
		self.reason = reason
		self.status = status
		super().__init__(f"fetch failed for issuer {issuer_id}: {reason}")

	def to_dict(self) -> dict:
		return {"id": self.issuer_id, "reason": self.reason, "status": self.status}
