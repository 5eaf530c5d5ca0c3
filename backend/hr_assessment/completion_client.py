from __future__ import annotations
import httpx
from typing import Any, Dict, Optional
from .decoding import loads
from .errors import CompletionError
from .settings import settings


class CompletionClient:
	"""Thin async wrapper over the Lab45 skills completion endpoint.

	One POST per call, no retries. Any transport, status or JSON failure is
	raised as CompletionError; callers decide what to fall back to.
	"""

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		endpoint: Optional[str] = None,
		model: Optional[str] = None,
		timeout: Optional[float] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key if api_key is not None else settings.lab45_api_key
		self.endpoint = endpoint or settings.lab45_endpoint
		self.model = model or settings.lab45_model
		self.emb_type = settings.lab45_emb_type
		if timeout is None:
			timeout = settings.completion_timeout_seconds
		# A zero/negative timeout means wait for the remote call indefinitely
		self._client = httpx.AsyncClient(timeout=timeout if timeout and timeout > 0 else None, transport=transport)

	@property
	def configured(self) -> bool:
		return bool(self.api_key)

	def _headers(self) -> Dict[str, str]:
		return {
			"Content-Type": "application/json",
			"Accept": "application/json",
			"Authorization": f"Bearer {self.api_key}",
		}

	def build_payload(self, system: str, prompt: str, *, max_output_tokens: int, temperature: float) -> Dict[str, Any]:
		return {
			"messages": [
				{"role": "system", "content": system},
				{"role": "user", "content": prompt},
			],
			"skill_parameters": {
				"model_name": self.model,
				"emb_type": self.emb_type,
				"max_output_tokens": max_output_tokens,
				"temperature": temperature,
			},
			"stream_response": False,
		}

	async def query(self, system: str, prompt: str, *, max_output_tokens: int, temperature: float) -> Any:
		"""Return the decoded JSON body of the completion response."""
		if not self.configured:
			raise CompletionError("LAB45_API_KEY is not configured")
		payload = self.build_payload(system, prompt, max_output_tokens=max_output_tokens, temperature=temperature)
		try:
			r = await self._client.post(self.endpoint, headers=self._headers(), json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			raise CompletionError(
				f"Lab45 API error: {http_err.response.status_code} - {http_err.response.text}"
			) from http_err
		except httpx.RequestError as net_err:
			raise CompletionError(f"Lab45 request failed: {net_err!r}") from net_err
		try:
			return loads(r.content)
		except ValueError as err:
			raise CompletionError(f"Unexpected Lab45 response: {r.text[:500]}") from err

	async def aclose(self) -> None:
		await self._client.aclose()
