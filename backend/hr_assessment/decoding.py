"""Decoding of the completion service's response envelope.

The envelope is untrusted: depending on deployment it arrives as an
OpenAI-style ``choices`` list, a ``data.content`` wrapper, or occasionally
the target object itself. Matchers are tried in order; the first hit wins
and anything unmatched decodes to the ``fallback`` variant.
"""
from __future__ import annotations
import json
import re
from dataclasses import dataclass
from typing import Any, Callable, List, Literal, Optional, Tuple

Kind = Literal["content", "direct", "fallback"]


@dataclass(frozen=True)
class Decoded:
	kind: Kind
	value: Any = None
	reason: str = ""

	@property
	def is_fallback(self) -> bool:
		return self.kind == "fallback"


def _choices_content(raw: Any) -> Optional[str]:
	try:
		content = raw["choices"][0]["message"]["content"]
	except (KeyError, IndexError, TypeError):
		return None
	return content if isinstance(content, str) and content else None


def _data_content(raw: Any) -> Optional[str]:
	try:
		content = raw["data"]["content"]
	except (KeyError, TypeError):
		return None
	return content if isinstance(content, str) and content else None


CONTENT_MATCHERS: List[Tuple[str, Callable[[Any], Optional[str]]]] = [
	("choices[0].message.content", _choices_content),
	("data.content", _data_content),
]


def is_analysis_shape(raw: Any) -> bool:
	# An empty categoryScores object still counts as present
	return isinstance(raw, dict) and bool(raw.get("overallScore")) and isinstance(raw.get("categoryScores"), dict)


def is_recommendations_shape(raw: Any) -> bool:
	return isinstance(raw, dict) and isinstance(raw.get("recommendations"), list)


_FENCE = re.compile(r"^```[a-zA-Z0-9_-]*\s*\n(.*?)\n?```\s*$", re.DOTALL)


def strip_code_fences(text: str) -> str:
	text = text.strip()
	m = _FENCE.match(text)
	return m.group(1).strip() if m else text


def _reject_constant(name: str) -> Any:
	raise ValueError(f"non-standard JSON constant {name}")


def loads(text: Any) -> Any:
	"""json.loads that refuses NaN and Infinity, which have no JSON encoding."""
	return json.loads(text, parse_constant=_reject_constant)


def decode(raw: Any, direct_match: Callable[[Any], bool]) -> Decoded:
	"""Turn a raw response body into a content, direct or fallback variant."""
	content = source = None
	for name, matcher in CONTENT_MATCHERS:
		content = matcher(raw)
		if content is not None:
			source = name
			break
	if content is None:
		if direct_match(raw):
			return Decoded("direct", raw)
		return Decoded("fallback", reason="no content in response")
	try:
		return Decoded("content", loads(strip_code_fences(content)), reason=source)
	except ValueError as exc:
		return Decoded("fallback", reason=f"{source} is not valid JSON: {exc}")
