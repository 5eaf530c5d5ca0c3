from __future__ import annotations
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ..catalog import utc_timestamp
from ..dependencies import get_recommendation_client
from ..recommendations import RecommendationClient
from ..schemas import GenerateRecommendationsRequest, GenerateRecommendationsResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["recommendations"])


@router.post("/generate-recommendations", response_model=GenerateRecommendationsResponse)
async def generate_recommendations(
	req: Optional[GenerateRecommendationsRequest] = None,
	client: RecommendationClient = Depends(get_recommendation_client),
):
	req = req or GenerateRecommendationsRequest()
	try:
		recommendations = await client.generate(req.currentRecommendations or [], req.organizationContext)
	except Exception:
		logger.exception("Error generating recommendations")
		raise HTTPException(status_code=500, detail="Failed to generate recommendations")
	return {
		"success": True,
		"recommendations": recommendations,
		"generatedAt": utc_timestamp(),
	}
