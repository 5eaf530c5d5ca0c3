from __future__ import annotations
import logging

from fastapi import APIRouter, Depends, HTTPException

from ..catalog import QuestionCatalog
from ..dependencies import get_catalog
from ..errors import CatalogError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/questions", tags=["questions"])


@router.get("")
def list_questions(catalog: QuestionCatalog = Depends(get_catalog)):
	try:
		return catalog.load().model_dump(exclude_none=True)
	except CatalogError as e:
		logger.error("Error fetching questions: %s", e)
		raise HTTPException(status_code=500, detail="Failed to fetch questions")


@router.get("/{category_id}")
def get_category(category_id: str, catalog: QuestionCatalog = Depends(get_catalog)):
	try:
		category = catalog.get_category(category_id)
	except CatalogError as e:
		logger.error("Error fetching category questions: %s", e)
		raise HTTPException(status_code=500, detail="Failed to fetch category questions")
	if category is None:
		raise HTTPException(status_code=404, detail="Category not found")
	return category.model_dump()
