from __future__ import annotations
import json
from typing import Any, Dict, List, Mapping, Optional

from .schemas import Catalog, OrganizationContext

ANALYSIS_SYSTEM_PROMPT = (
	"You are an expert HR maturity assessment analyst with deep knowledge of:\n"
	"- Modern HR practices and digital transformation\n"
	"- AI adoption in HR functions\n"
	"- Skills-based talent management\n"
	"- Hybrid work optimization\n"
	"- Data-driven HR decision making\n\n"
	"Always provide your analysis as a valid JSON object with the exact structure requested.\n"
	"Ensure all scores are realistic and based on the assessment responses."
)

RECOMMENDATIONS_SYSTEM_PROMPT = (
	"You are an expert HR transformation consultant specializing in AI-powered HR solutions, "
	"digital transformation, and modern workplace practices. Generate innovative, practical recommendations "
	"that help organizations advance their HR maturity. Focus on cutting-edge but implementable solutions.\n"
	"Always respond with valid JSON format."
)

ANALYSIS_SCHEMA = """{
  "overallScore": number (1-5),
  "categoryScores": {
    "category-id": number (1-5)
  },
  "strengths": ["strength1", "strength2", ...],
  "areasForImprovement": ["area1", "area2", ...],
  "recommendations": [
    {
      "title": "recommendation title",
      "description": "detailed description",
      "priority": "High|Medium|Low",
      "category": "category name",
      "timeframe": "Short-term|Medium-term|Long-term"
    }
  ],
  "maturityLevel": "string description of overall maturity",
  "nextSteps": ["step1", "step2", ...]
}"""

RECOMMENDATIONS_SCHEMA = """{
  "recommendations": [
    {
      "title": "recommendation title",
      "description": "detailed description of the recommendation",
      "impact": "High|Medium|Low",
      "timeframe": "Short-term|Medium-term|Long-term",
      "category": "category name",
      "steps": ["step1", "step2", "step3", "step4", "step5"]
    }
  ]
}"""


def _answered(value: Any) -> bool:
	if isinstance(value, (list, dict)):
		return True
	return bool(value)


def format_answers(
	answers: Mapping[str, Any],
	comments: Optional[Mapping[str, Any]],
	catalog: Catalog,
) -> List[Dict[str, Any]]:
	"""Group answered questions by category, in catalog order.

	A question counts as answered unless its value is null, false, 0 or an
	empty string; empty lists and objects count. Answers for ids the catalog
	does not know are ignored; categories with nothing answered are left out.
	"""
	comments = comments or {}
	formatted: List[Dict[str, Any]] = []
	for category in catalog.categories:
		category_answers = []
		for question in category.questions:
			selected = answers.get(question.id)
			if not _answered(selected):
				continue
			option = next((o for o in question.options if o.value == selected), None)
			category_answers.append({
				"questionId": question.id,
				"question": question.text,
				"answer": selected,
				"answerText": option.text if option else f"Level {selected}",
				"comment": comments.get(question.id) or None,
			})
		if category_answers:
			formatted.append({
				"categoryId": category.id,
				"categoryName": category.name,
				"categoryDescription": category.description,
				"answers": category_answers,
			})
	return formatted


def build_analysis_prompt(
	answers: Mapping[str, Any],
	comments: Optional[Mapping[str, Any]],
	catalog: Catalog,
) -> str:
	formatted = format_answers(answers, comments, catalog)
	return (
		"Analyze the following HR maturity assessment responses for an organization:\n\n"
		"Assessment Data:\n"
		f"{json.dumps(formatted, indent=2)}\n\n"
		"Please provide a comprehensive analysis in JSON format with this exact structure:\n"
		f"{ANALYSIS_SCHEMA}\n\n"
		"Consider the organization's current state and provide realistic, implementable suggestions\n"
		"that align with modern HR practices, AI adoption, and hybrid work models."
	)


def build_recommendation_prompt(current_titles: List[str], context: OrganizationContext) -> str:
	focus = ", ".join(context.focusAreas) if context.focusAreas else "General"
	return (
		"Generate 2-3 new HR maturity recommendations that are different from the existing ones.\n\n"
		"Current recommendations already provided:\n"
		f"{', '.join(current_titles)}\n\n"
		"Organization context:\n"
		f"- Maturity Level: {context.maturityLevel or 'Unknown'}\n"
		f"- Focus Areas: {focus}\n"
		f"- Industry: {context.industry or 'General'}\n\n"
		"Please provide innovative, actionable recommendations that:\n"
		"1. Are specific to the organization's current maturity level\n"
		"2. Focus on emerging HR technologies and practices\n"
		"3. Include AI/ML applications where appropriate\n"
		"4. Are different from the existing recommendations\n"
		"5. Consider the organization's industry context\n\n"
		"Return recommendations in this JSON format:\n"
		f"{RECOMMENDATIONS_SCHEMA}"
	)
