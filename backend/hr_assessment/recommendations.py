from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from .completion_client import CompletionClient
from .decoding import decode, is_recommendations_shape
from .errors import CompletionError
from .fallbacks import Fallbacks
from .prompts import RECOMMENDATIONS_SYSTEM_PROMPT, build_recommendation_prompt
from .schemas import OrganizationContext
from .settings import settings

logger = logging.getLogger(__name__)


def _as_list(value: Any) -> Optional[List[Dict[str, Any]]]:
	# Accept {"recommendations": [...]} or a bare array
	if isinstance(value, dict):
		value = value.get("recommendations")
	if not isinstance(value, list):
		return None
	return [item for item in value if isinstance(item, dict)]


class RecommendationClient:
	def __init__(self, client: CompletionClient, fallbacks: Fallbacks) -> None:
		self.client = client
		self.fallbacks = fallbacks

	async def generate(
		self,
		current_titles: List[str],
		context: Optional[OrganizationContext] = None,
	) -> List[Dict[str, Any]]:
		"""New recommendations distinct from ``current_titles``; never raises."""
		context = context or OrganizationContext()
		prompt = build_recommendation_prompt(current_titles, context)
		logger.info("Calling Lab45 for recommendation generation")
		try:
			raw = await self.client.query(
				RECOMMENDATIONS_SYSTEM_PROMPT,
				prompt,
				max_output_tokens=settings.recommendations_max_tokens,
				temperature=settings.recommendations_temperature,
			)
		except CompletionError as exc:
			logger.warning("Lab45 recommendations failed, using fallback: %s", exc)
			return self.fallbacks.recommendations(current_titles)

		decoded = decode(raw, is_recommendations_shape)
		recs = None if decoded.is_fallback else _as_list(decoded.value)
		if recs is None:
			reason = decoded.reason if decoded.is_fallback else "no recommendations list in response"
			logger.warning("Using fallback recommendations: %s", reason)
			return self.fallbacks.recommendations(current_titles)
		logger.info("Lab45 returned %d recommendations", len(recs))
		return recs
