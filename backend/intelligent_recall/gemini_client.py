from __future__ import annotations
import httpx
from typing import Any, Dict, List, Optional
from .settings import settings


class EmptyResponseError(RuntimeError):
	"""Gemini answered 2xx but the first candidate carried no text."""


class MalformedResponseError(RuntimeError):
	"""Gemini answered 2xx with a body that is not a generateContent payload."""


def extract_text(data: Any) -> str:
	# Joins the text parts of the first candidate, skipping "thought" parts
	if not isinstance(data, dict):
		raise MalformedResponseError(f"Unexpected Gemini response: {data!r}")
	candidates = data.get("candidates") or []
	if not isinstance(candidates, list):
		raise MalformedResponseError(f"Unexpected candidates: {candidates!r}")
	if not candidates:
		return ""
	first = candidates[0]
	if not isinstance(first, dict):
		raise MalformedResponseError(f"Unexpected candidate: {first!r}")
	content = first.get("content") or {}
	if not isinstance(content, dict):
		raise MalformedResponseError(f"Unexpected candidate content: {content!r}")
	parts: List[Dict[str, Any]] = content.get("parts") or []
	if not isinstance(parts, list):
		raise MalformedResponseError(f"Unexpected parts: {parts!r}")
	texts = []
	for p in parts:
		if not isinstance(p, dict) or p.get("thought"):
			continue
		text = p.get("text")
		if text is None:
			continue
		if not isinstance(text, str):
			raise MalformedResponseError(f"Non-text part: {p!r}")
		texts.append(text)
	return "".join(texts)


class GeminiClient:
	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		http_client: Optional[httpx.AsyncClient] = None,
	) -> None:
		self.api_key = api_key or settings.gemini_api_key
		if not self.api_key:
			raise ValueError("GEMINI_API_KEY is not configured")
		self.model = model or settings.gemini_model
		self.provider = settings.gemini_provider
		if self.provider == "vertex":
			region = settings.vertex_region
			project = settings.vertex_project or "placeholder-project"
			# Vertex AI Generative REST endpoint (API key via header)
			self.base_url = base_url or (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}/publishers/google/models/{self.model}:generateContent"
			)
			self._auth_in_query = False
		else:
			# Google AI Studio (Generative Language API)
			self.base_url = base_url or f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
			self._auth_in_query = True
		self._client = http_client or httpx.AsyncClient(timeout=settings.gemini_timeout_seconds)

	async def generate(self, prompt: str, *, response_schema: Optional[Dict[str, Any]] = None) -> str:
		payload: Dict[str, Any] = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
		if response_schema is not None:
			payload["generationConfig"] = {
				"responseMimeType": "application/json",
				"responseSchema": response_schema,
			}
		return await self._post_payload(payload)

	async def _post_payload(self, payload: Dict[str, Any]) -> str:
		params: Dict[str, Any] = {}
		headers: Dict[str, str] = {}
		if self._auth_in_query:
			params["key"] = self.api_key
		else:
			headers["x-goog-api-key"] = self.api_key
		r = await self._client.post(self.base_url, params=params, headers=headers, json=payload)
		r.raise_for_status()
		try:
			data = r.json()
		except ValueError as err:
			raise MalformedResponseError(f"Unexpected Gemini response: {r.text}") from err
		text = extract_text(data)
		if not text.strip():
			raise EmptyResponseError("Gemini returned no text")
		return text

	async def aclose(self) -> None:
		await self._client.aclose()
