from __future__ import annotations
import logging
import httpx
from typing import Any, Dict, List, Optional
from .errors import CollaboratorError, MissingCredentialsError
from .settings import settings

logger = logging.getLogger(__name__)

PROVIDERS = ("ai_studio", "vertex", "openrouter")


class GeminiClient:
	"""One-shot text generation against the configured backend.

	Every call issues exactly one HTTP request; failures are raised as
	``CollaboratorError`` and never retried here.
	"""

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		provider: Optional[str] = None,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		timeout: Optional[float] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.provider = provider or settings.llm_provider
		if self.provider not in PROVIDERS:
			raise CollaboratorError(f"Unknown LLM_PROVIDER {self.provider!r}; expected one of {PROVIDERS}")
		if self.provider == "openrouter":
			self.api_key = api_key or settings.openrouter_api_key
			self.model = model or settings.openrouter_model
			self.base_url = base_url or settings.openrouter_base_url
		else:
			self.api_key = api_key or settings.gemini_api_key
			self.model = model or settings.gemini_model
		if not self.api_key:
			raise MissingCredentialsError("GEMINI_API_KEY is not configured" if self.provider != "openrouter" else "OPENROUTER_API_KEY is not configured")
		if self.provider == "vertex":
			region = settings.vertex_region
			project = settings.vertex_project or "placeholder-project"
			# Vertex AI Generative REST endpoint (API key via header)
			self.base_url = base_url or (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}/publishers/google/models/{self.model}:generateContent"
			)
		elif self.provider == "ai_studio":
			# Google AI Studio (Generative Language API)
			self.base_url = base_url or f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
		self._client = httpx.AsyncClient(timeout=timeout or settings.llm_timeout_seconds, transport=transport)

	async def generate(
		self,
		prompt: str,
		*,
		system_instruction: Optional[str] = None,
		thinking_budget: Optional[int] = None,
	) -> str:
		if self.provider == "openrouter":
			return await self._generate_openrouter(prompt, system_instruction=system_instruction)
		payload: Dict[str, Any] = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
		if system_instruction:
			payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
		if thinking_budget is not None:
			payload["generationConfig"] = {"thinkingConfig": {"thinkingBudget": int(thinking_budget)}}
		return await self._post_gemini(payload)

	async def _post_gemini(self, payload: Dict[str, Any]) -> str:
		params: Dict[str, Any] = {}
		headers: Dict[str, str] = {}
		if self.provider == "ai_studio":
			params["key"] = self.api_key
		else:
			headers["x-goog-api-key"] = self.api_key
		r = await self._send(self.base_url, params=params, headers=headers, json=payload)
		try:
			data = r.json()
			parts: List[Dict[str, Any]] = data["candidates"][0]["content"]["parts"]
			# Thought summaries arrive as parts flagged "thought"; only the answer is returned
			return "".join(p.get("text", "") for p in parts if not p.get("thought"))
		except (ValueError, KeyError, IndexError, TypeError, AttributeError) as err:
			raise CollaboratorError(f"Unexpected Gemini response: {r.text[:500]}") from err

	async def _generate_openrouter(self, prompt: str, *, system_instruction: Optional[str]) -> str:
		headers = {
			"Authorization": f"Bearer {self.api_key}",
			"Content-Type": "application/json",
			"HTTP-Referer": settings.openrouter_referer,
			"X-Title": settings.openrouter_title,
		}
		messages: List[Dict[str, str]] = []
		if system_instruction:
			messages.append({"role": "system", "content": system_instruction})
		messages.append({"role": "user", "content": prompt})
		payload: Dict[str, Any] = {"model": self.model, "messages": messages}
		r = await self._send(self.base_url, headers=headers, json=payload)
		try:
			data = r.json()
			return data["choices"][0]["message"]["content"] or ""
		except (ValueError, KeyError, IndexError, TypeError) as err:
			raise CollaboratorError(f"Unexpected OpenRouter response: {r.text[:500]}") from err

	async def _send(self, url: str, **kwargs: Any) -> httpx.Response:
		try:
			r = await self._client.post(url, **kwargs)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			detail = _error_detail(http_err.response)
			logger.warning("%s request failed with HTTP %s: %s", self.provider, http_err.response.status_code, detail)
			raise CollaboratorError(f"HTTP {http_err.response.status_code}: {detail}") from http_err
		except httpx.RequestError as net_err:
			logger.warning("%s request failed: %s", self.provider, net_err)
			raise CollaboratorError(str(net_err) or net_err.__class__.__name__) from net_err
		return r

	async def aclose(self) -> None:
		await self._client.aclose()


def _error_detail(response: httpx.Response) -> str:
	# Google and OpenRouter both wrap failures as {"error": {"message": ...}}
	try:
		data = response.json()
		message = data.get("error", {}).get("message")
		if message:
			return str(message)
	except (ValueError, AttributeError):
		pass
	return response.text[:500] or response.reason_phrase
