from __future__ import annotations
import logging
from typing import Any, Dict

from .completion_client import CompletionClient
from .decoding import decode, is_analysis_shape
from .errors import CompletionError
from .fallbacks import Fallbacks
from .prompts import ANALYSIS_SYSTEM_PROMPT
from .settings import settings

logger = logging.getLogger(__name__)


class AnalysisClient:
	"""Scores an assessment prompt via the completion service.

	``analyze`` never raises: a transport failure, a missing or unparseable
	content field all resolve to the configured fallback analysis. A
	parseable but oddly shaped object is returned uncorrected.
	"""

	def __init__(self, client: CompletionClient, fallbacks: Fallbacks) -> None:
		self.client = client
		self.fallbacks = fallbacks

	async def analyze(self, prompt: str) -> Dict[str, Any]:
		logger.info("Calling Lab45 for assessment analysis")
		logger.debug("Analysis prompt: %s", prompt)
		try:
			raw = await self.client.query(
				ANALYSIS_SYSTEM_PROMPT,
				prompt,
				max_output_tokens=settings.analysis_max_tokens,
				temperature=settings.analysis_temperature,
			)
		except CompletionError as exc:
			logger.warning("Lab45 analysis failed, using fallback analysis: %s", exc)
			return self.fallbacks.analysis()

		decoded = decode(raw, is_analysis_shape)
		if decoded.is_fallback:
			logger.warning("Using fallback analysis: %s", decoded.reason)
			return self.fallbacks.analysis()
		if not isinstance(decoded.value, dict):
			logger.warning("Using fallback analysis: Lab45 content is not a JSON object")
			return self.fallbacks.analysis()
		if decoded.kind == "direct":
			logger.info("Lab45 returned analysis object directly")
		else:
			logger.info("Lab45 analysis completed successfully")
		return decoded.value
