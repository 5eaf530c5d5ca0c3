from __future__ import annotations
import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .schemas import Analysis, Recommendation
from .settings import PACKAGE_DIR

logger = logging.getLogger(__name__)

DEFAULT_FALLBACKS_PATH = PACKAGE_DIR / "data" / "fallbacks.json"
MAX_FALLBACK_RECOMMENDATIONS = 3


class Fallbacks:
	"""Canned analysis and recommendation pool used when the completion service fails."""

	def __init__(self, analysis: Dict[str, Any], recommendations: List[Dict[str, Any]]) -> None:
		# Validate once at load so a bad override file fails at startup, not mid-request
		Analysis.model_validate(analysis)
		for rec in recommendations:
			Recommendation.model_validate(rec)
		self._analysis = analysis
		self._recommendations = recommendations

	@classmethod
	def load(cls, path: Optional[Path] = None) -> "Fallbacks":
		path = Path(path) if path else DEFAULT_FALLBACKS_PATH
		data = json.loads(path.read_text(encoding="utf-8"))
		logger.debug("Loaded fallbacks from %s", path)
		return cls(data["analysis"], data.get("recommendations", []))

	def analysis(self) -> Dict[str, Any]:
		return copy.deepcopy(self._analysis)

	def recommendations(self, current_titles: List[str]) -> List[Dict[str, Any]]:
		"""Pool entries whose title's first word is not already mentioned, at most three.

		Coarse keyword filter: "Implement predictive analytics ..." is dropped if
		any existing title contains "implement" anywhere, case-insensitively.
		"""
		existing = [t.lower() for t in current_titles if isinstance(t, str)]
		picked = []
		for rec in self._recommendations:
			first_word = rec["title"].lower().split(" ")[0]
			if any(first_word in title for title in existing):
				continue
			picked.append(copy.deepcopy(rec))
		return picked[:MAX_FALLBACK_RECOMMENDATIONS]
