'''
Mock Issuer Service

Purpose: Offline stand-in for the external issuer microservice.

Responsibilities:
- Answer "which ISINs belong to issuer <id>" with deterministic data
- Simulate network latency per call
- Simulate non-success responses for configured issuer ids

Why important:
- Demonstrates I/O-bound enrichment without external dependencies
- Stable answers make enrichment reruns reproducible
'''

import threading
import time
from typing import Dict, Iterable, List, Optional

import structlog

from ISSUERS.Enrichment.exceptions import FetchFailure
from ISSUERS.Enrichment.rules import EnrichmentConfigLoader

__all__ = ["MockIssuerService", "isin_check_digit", "make_isin", "build_service_from_config"]

logger = structlog.get_logger()


def isin_check_digit(body: str) -> str:
    """
    Compute the ISO 6166 check digit for an 11 character ISIN body.

    Letters expand to two digits (A=10 .. Z=35), then the Luhn algorithm
    runs over the resulting digit string.

    Args:
        body: Country code (2 letters) + NSIN (9 alphanumerics)

    Returns:
        Single check digit as a string

    Raises:
        ValueError: If body is not 11 alphanumeric characters
    """
    if not isinstance(body, str) or len(body) != 11 or not body.isalnum():
        raise ValueError("ISIN body must be 11 alphanumeric characters")

    digits = "".join(str(int(ch, 36)) for ch in body.upper())

    total = 0
    for idx, ch in enumerate(reversed(digits)):
        n = int(ch)
        # Rightmost digit is doubled
        if idx % 2 == 0:
            n *= 2
            if n > 9:
                n -= 9
        total += n

    return str((10 - total % 10) % 10)


def make_isin(country_code: str, nsin: str) -> str:
    """Build a full ISIN from a country code and a (zero padded) NSIN."""
    if not isinstance(country_code, str) or len(country_code) != 2 or not country_code.isalpha():
        raise ValueError("country_code must be two letters")
    nsin = str(nsin).upper().rjust(9, "0")
    if len(nsin) != 9:
        raise ValueError("NSIN must be at most 9 characters")
    body = country_code.upper() + nsin
    return body + isin_check_digit(body)


class MockIssuerService:
    """
    Mock external issuer service.

    fetch(issuer_id) either returns the issuer's ISINs or raises FetchFailure.
    Safe to call from many threads at once.
    """

    def __init__(
        self,
        latency_seconds: float = 1.0,
        failing_ids: Optional[Iterable[int]] = None,
        failure_status: int = 503,
        isins_per_issuer: int = 2,
        country_code: str = "XS",
        base_url: str = "https://mock.issuer-service.local",
    ) -> None:
        if latency_seconds < 0:
            raise ValueError("latency_seconds must be non-negative")
        if isins_per_issuer < 1:
            raise ValueError("isins_per_issuer must be at least 1")

        self.latency_seconds = float(latency_seconds)
        self.failing_ids = set(failing_ids or [])
        self.failure_status = failure_status
        self.isins_per_issuer = isins_per_issuer
        self.country_code = country_code
        self.base_url = base_url

        self._lock = threading.Lock()
        self._calls: Dict[int, int] = {}

    def _record_call(self, issuer_id: int) -> None:
        with self._lock:
            self._calls[issuer_id] = self._calls.get(issuer_id, 0) + 1

    @property
    def call_count(self) -> int:
        """Total number of fetch calls served."""
        with self._lock:
            return sum(self._calls.values())

    def calls_for(self, issuer_id: int) -> int:
        with self._lock:
            return self._calls.get(issuer_id, 0)

    def isins_for(self, issuer_id: int) -> List[str]:
        """Deterministic ISINs for an issuer (no latency, no failures)."""
        return [
            make_isin(self.country_code, f"{issuer_id:07d}{n:02d}")
            for n in range(1, self.isins_per_issuer + 1)
        ]

    def fetch(self, issuer_id: int) -> List[str]:
        """
        Fetch the ISINs of one issuer.

        Args:
            issuer_id: Issuer identifier

        Returns:
            List of ISIN strings

        Raises:
            FetchFailure: If the service answers with a non-success status
        """
        self._record_call(issuer_id)
        logger.debug("issuer_service_call", issuer_id=issuer_id, url=f"{self.base_url}/issuers/{issuer_id}/isins")

        if self.latency_seconds:
            time.sleep(self.latency_seconds)

        if issuer_id in self.failing_ids:
            raise FetchFailure(
                issuer_id,
                f"issuer service responded with status {self.failure_status}",
                status=self.failure_status,
            )

        return self.isins_for(issuer_id)


def build_service_from_config(
    config_loader: EnrichmentConfigLoader,
    latency_seconds: Optional[float] = None,
    failing_ids: Optional[Iterable[int]] = None,
) -> MockIssuerService:
    """Create a MockIssuerService from config, with optional overrides."""
    service_cfg = config_loader.service_config
    return MockIssuerService(
        latency_seconds=config_loader.get_latency_seconds() if latency_seconds is None else latency_seconds,
        failing_ids=config_loader.get_failing_ids() if failing_ids is None else failing_ids,
        failure_status=int(service_cfg.get("failure_status", 503)),
        isins_per_issuer=int(service_cfg.get("isins_per_issuer", 2)),
        country_code=str(service_cfg.get("country_code", "XS")),
        base_url=str(service_cfg.get("base_url", "https://mock.issuer-service.local")),
    )
