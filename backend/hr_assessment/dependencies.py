from __future__ import annotations
from fastapi import Request

from .analysis import AnalysisClient
from .catalog import QuestionCatalog
from .recommendations import RecommendationClient
from .storage import ResultStore


# Wired up by the app lifespan; tests swap them via app.dependency_overrides

def get_catalog(request: Request) -> QuestionCatalog:
	return request.app.state.catalog


def get_store(request: Request) -> ResultStore:
	return request.app.state.store


def get_analysis_client(request: Request) -> AnalysisClient:
	return request.app.state.analysis_client


def get_recommendation_client(request: Request) -> RecommendationClient:
	return request.app.state.recommendation_client
