"""
Enrichment configuration and classification rules.

- Load pool, service, classification and logging settings from config.yml
- Derive an issuer classification label from the market sector context
"""

import os
from typing import Any, Dict, List, Sequence

import yaml

__all__ = ["EnrichmentConfigLoader", "SectorClassifier", "DEFAULT_RULES", "DEFAULT_LABEL"]


DEFAULT_LABEL = "Corporate"

DEFAULT_RULES = [
	{"sector": "Provinces and Municipalities", "label": "Municipality"},
	{"sector": "Sovereign", "label": "Sovereign"},
]


class EnrichmentConfigLoader:
	"""Load enrichment configuration (pool size, mock service, classification)."""

	def __init__(self, config_path: str) -> None:
		self._config_path = config_path
		self._config = self._load()

	def _load(self) -> Dict[str, Any]:
		if not os.path.isfile(self._config_path):
			raise FileNotFoundError(f"Enrichment config not found: {self._config_path}")
		with open(self._config_path, "r", encoding="utf-8") as f:
			try:
				data = yaml.safe_load(f)
			except yaml.YAMLError as e:
				raise yaml.YAMLError(f"Malformed YAML in {os.path.basename(self._config_path)}: {e}")
		if data is None:
			return {}
		if not isinstance(data, dict):
			raise ValueError("enrichment config must be a mapping")
		return data

	@property
	def config_path(self) -> str:
		return self._config_path

	@property
	def pool_config(self) -> Dict[str, Any]:
		return self._config.get("pool", {}) or {}

	@property
	def service_config(self) -> Dict[str, Any]:
		return self._config.get("service", {}) or {}

	@property
	def classification_config(self) -> Dict[str, Any]:
		return self._config.get("classification", {}) or {}

	@property
	def logging_config(self) -> Dict[str, Any]:
		return self._config.get("logging", {}) or {}

	def get_max_workers(self) -> int:
		"""Get thread pool capacity."""
		value = self.pool_config.get("max_workers", 8)
		if isinstance(value, bool) or not isinstance(value, int) or value < 1:
			raise ValueError("pool.max_workers must be a positive integer")
		return value

	def get_latency_seconds(self) -> float:
		value = self.service_config.get("latency_seconds", 1.0)
		if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
			raise ValueError("service.latency_seconds must be a non-negative number")
		return float(value)

	def get_failing_ids(self) -> List[int]:
		value = self.service_config.get("failing_ids", []) or []
		if not isinstance(value, list):
			raise ValueError("service.failing_ids must be a list")
		return [int(v) for v in value]

	def get_classification_rules(self) -> List[Dict[str, str]]:
		"""
		Get sector -> label rules in precedence order.

		Falls back to the built-in table when the section is missing.
		"""
		rules = self.classification_config.get("rules")
		if not rules:
			return list(DEFAULT_RULES)
		if not isinstance(rules, list):
			raise ValueError("classification.rules must be a list")
		for rule in rules:
			if not isinstance(rule, dict) or "sector" not in rule or "label" not in rule:
				raise ValueError("each classification rule must have 'sector' and 'label'")
		return rules

	def get_default_label(self) -> str:
		return str(self.classification_config.get("default", DEFAULT_LABEL))

	def get_log_level(self) -> str:
		return str(self.logging_config.get("level", "INFO")).upper()

	def get_log_format(self) -> str:
		return str(self.logging_config.get("format", "console"))


class SectorClassifier:
	"""Classify an issuer from the first entry of the market sector context."""

	def __init__(self, rules: Sequence[Dict[str, str]] = None, default_label: str = DEFAULT_LABEL) -> None:
		self._rules = list(rules) if rules is not None else list(DEFAULT_RULES)
		self._default = default_label

	@classmethod
	def from_config(cls, config_loader: EnrichmentConfigLoader) -> "SectorClassifier":
		return cls(config_loader.get_classification_rules(), config_loader.get_default_label())

	def classify(self, market_sector: Sequence[str]) -> str:
		"""
		Derive the classification label.

		Args:
			market_sector: Ordered sector labels; only the first one is matched

		Returns:
			Label of the first matching rule, or the default label
			(also for an empty context)
		"""
		if not market_sector:
			return self._default

		first = market_sector[0]
		for rule in self._rules:
			if rule.get("sector") == first:
				return rule.get("label", self._default)

		return self._default
