from __future__ import annotations
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Option(BaseModel):
	model_config = ConfigDict(extra="allow")

	# 1..5 in the seed; operator-edited catalogs are served as written
	value: int
	text: str


class Question(BaseModel):
	model_config = ConfigDict(extra="allow")

	id: str
	text: str
	category: str
	# Carried as catalog data only; no scoring reads it
	weight: float = 1.0
	options: List[Option]


class Category(BaseModel):
	model_config = ConfigDict(extra="allow")

	id: str
	name: str
	description: str = ""
	questions: List[Question] = Field(default_factory=list)


class Catalog(BaseModel):
	model_config = ConfigDict(extra="allow")

	id: str = "default"
	version: str = "1.0"
	createdAt: Optional[str] = None
	categories: List[Category]

	def category(self, category_id: str) -> Optional[Category]:
		for cat in self.categories:
			if cat.id == category_id:
				return cat
		return None


Level = Literal["High", "Medium", "Low"]
Timeframe = Literal["Short-term", "Medium-term", "Long-term"]


class Recommendation(BaseModel):
	# Remote output is untrusted; unknown keys are kept as-is
	model_config = ConfigDict(extra="allow")

	title: str
	description: str
	impact: Optional[Level] = None
	priority: Optional[Level] = None
	timeframe: Timeframe
	category: str
	steps: Optional[List[str]] = None


class Analysis(BaseModel):
	model_config = ConfigDict(extra="allow")

	overallScore: float = Field(ge=1, le=5)
	categoryScores: Dict[str, float]
	strengths: List[str]
	areasForImprovement: List[str]
	recommendations: List[Recommendation]
	maturityLevel: str
	nextSteps: List[str]


class SubmitAssessmentRequest(BaseModel):
	# Presence is checked by the handler so a missing field is a 400, not a 422
	organizationName: Optional[str] = None
	answers: Optional[Dict[str, Any]] = None
	comments: Optional[Dict[str, Optional[str]]] = None


class OrganizationContext(BaseModel):
	model_config = ConfigDict(extra="allow")

	maturityLevel: Optional[str] = None
	focusAreas: Optional[List[str]] = None
	industry: Optional[str] = None


class GenerateRecommendationsRequest(BaseModel):
	currentRecommendations: Optional[List[str]] = None
	organizationContext: Optional[OrganizationContext] = None


class AssessmentResult(BaseModel):
	id: str
	organizationName: str
	submittedAt: str
	answers: Dict[str, Any]
	comments: Dict[str, Any]
	# Stored exactly as the analysis client produced it
	analysis: Dict[str, Any]


class SubmitAssessmentResponse(BaseModel):
	success: bool = True
	result: AssessmentResult


class GenerateRecommendationsResponse(BaseModel):
	success: bool = True
	recommendations: List[Dict[str, Any]]
	generatedAt: str


class ResultSummary(BaseModel):
	id: str
	organizationName: str
	submittedAt: str
	overallScore: Any = 0
	maturityLevel: Any = "Unknown"

	@classmethod
	def from_result(cls, result: Dict[str, Any]) -> "ResultSummary":
		analysis = result.get("analysis") or {}
		if not isinstance(analysis, dict):
			analysis = {}
		return cls(
			id=result.get("id", ""),
			organizationName=result.get("organizationName", ""),
			submittedAt=result.get("submittedAt", ""),
			overallScore=analysis.get("overallScore") or 0,
			maturityLevel=analysis.get("maturityLevel") or "Unknown",
		)


class HealthResponse(BaseModel):
	status: str
	timestamp: str
	version: str
	lab45Configured: bool
