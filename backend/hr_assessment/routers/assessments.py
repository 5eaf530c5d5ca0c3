from __future__ import annotations
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from ..analysis import AnalysisClient
from ..catalog import QuestionCatalog, utc_timestamp
from ..dependencies import get_analysis_client, get_catalog, get_store
from ..errors import StoreError
from ..prompts import build_analysis_prompt
from ..schemas import ResultSummary, SubmitAssessmentRequest, SubmitAssessmentResponse
from ..storage import ResultStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["assessments"])


@router.post("/submit-assessment", response_model=SubmitAssessmentResponse)
async def submit_assessment(
	req: SubmitAssessmentRequest,
	catalog: QuestionCatalog = Depends(get_catalog),
	store: ResultStore = Depends(get_store),
	analysis_client: AnalysisClient = Depends(get_analysis_client),
):
	if req.answers is None or not req.organizationName:
		raise HTTPException(status_code=400, detail="Missing required fields")
	logger.info("Processing assessment for: %s", req.organizationName)
	logger.debug("Answers: %s", req.answers)
	try:
		# File reads and the locked append stay off the event loop
		prompt = build_analysis_prompt(req.answers, req.comments, await run_in_threadpool(catalog.load))
		# Never raises; degrades to the fallback analysis
		analysis = await analysis_client.analyze(prompt)
		result = await run_in_threadpool(store.append, {
			"organizationName": req.organizationName,
			"submittedAt": utc_timestamp(),
			"answers": req.answers,
			"comments": req.comments or {},
			"analysis": analysis,
		})
	except Exception:
		logger.exception("Error submitting assessment for %s", req.organizationName)
		raise HTTPException(status_code=500, detail="Failed to submit assessment")
	logger.info("Assessment completed for: %s (id=%s)", req.organizationName, result["id"])
	return {"success": True, "result": result}


@router.get("/results/{result_id}")
def get_result(result_id: str, store: ResultStore = Depends(get_store)):
	try:
		result = store.get(result_id)
	except StoreError as e:
		logger.error("Error fetching result: %s", e)
		raise HTTPException(status_code=500, detail="Failed to fetch result")
	if result is None:
		raise HTTPException(status_code=404, detail="Result not found")
	return result


@router.get("/results", response_model=List[ResultSummary])
def list_results(store: ResultStore = Depends(get_store)):
	# Summaries only; answers and comments stay out of the listing
	try:
		return [ResultSummary.from_result(r) for r in store.list_results()]
	except StoreError as e:
		logger.error("Error fetching results: %s", e)
		raise HTTPException(status_code=500, detail="Failed to fetch results")
