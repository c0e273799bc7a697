"""
Gemini generateContent client.

One POST per analysis, no retries. The transport is injectable so tests can
serve canned responses without touching the network.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import httpx

from app.core.config import settings
from app.errors import ConfigurationError, ModelUnavailable
from app.schemas.analysis import GeminiAnalysis
from app.services.gemini_response_parser import parse_model_response

logger = logging.getLogger(__name__)

# (url, json_body, query_params) -> (status_code, payload, headers)
Fetcher = Callable[[str, Dict[str, Any], Dict[str, str]], Awaitable[Tuple[int, Any, Dict[str, str]]]]

DIAGNOSTIC_HEADERS = (
    "x-request-id",
    "retry-after",
    "x-ratelimit-limit",
    "x-ratelimit-remaining",
    "x-ratelimit-reset",
)


class GeminiClient:
    """Thin async wrapper around the Gemini REST endpoint."""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        debug_logs: Optional[bool] = None,
        fetcher: Optional[Fetcher] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.base_url = base_url if base_url is not None else settings.GEMINI_BASE_URL
        self.model = model or settings.GEMINI_MODEL
        self.timeout = timeout or settings.GEMINI_TIMEOUT_SECONDS
        self.debug_logs = settings.GEMINI_DEBUG_LOGS if debug_logs is None else debug_logs
        self.fetcher = fetcher or self._http_post

    @property
    def endpoint(self) -> str:
        return f"{(self.base_url or '').rstrip('/')}/models/{self.model}:generateContent"

    def validate_config(self) -> None:
        if not self.api_key:
            raise ConfigurationError("Gemini API key is not configured.")
        if not self.base_url:
            raise ConfigurationError("Gemini API base URL is not configured.")

    def build_request_body(self, prompt: str) -> Dict[str, Any]:
        return {
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": prompt}],
                }
            ],
            "generationConfig": {
                "temperature": settings.GEMINI_TEMPERATURE,
                "topP": settings.GEMINI_TOP_P,
                "topK": settings.GEMINI_TOP_K,
                "maxOutputTokens": settings.GEMINI_MAX_OUTPUT_TOKENS,
                "responseMimeType": "application/json",
            },
        }

    async def _http_post(
        self, url: str, json_body: Dict[str, Any], params: Dict[str, str]
    ) -> Tuple[int, Any, Dict[str, str]]:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(url, json=json_body, params=params)
        try:
            payload = resp.json()
        except ValueError:
            payload = resp.text
        return resp.status_code, payload, dict(resp.headers)

    async def generate(self, prompt: str) -> Any:
        """POST the prompt and return the decoded response body."""
        self.validate_config()
        body = self.build_request_body(prompt)

        try:
            status_code, payload, headers = await self.fetcher(self.endpoint, body, {"key": self.api_key})
        except httpx.HTTPError as exc:
            logger.error("Gemini network error model=%s error=%s", self.model, exc)
            raise ModelUnavailable("Gemini API network error.", body=str(exc)) from exc

        if not 200 <= status_code < 300:
            lowered = {key.lower(): value for key, value in (headers or {}).items()}
            logger.error(
                "Gemini API request failed status=%s headers=%s",
                status_code,
                {name: lowered.get(name) for name in DIAGNOSTIC_HEADERS},
            )
            if status_code == 429:
                raise ModelUnavailable(
                    "Gemini API rate limit exceeded. Please wait a moment and try again.",
                    status=status_code,
                    body=payload,
                )
            raise ModelUnavailable("Gemini API request failed.", status=status_code, body=payload)

        if self.debug_logs:
            logger.debug("Gemini raw response: %s", payload)
        return payload

    async def analyze(self, prompt: str) -> GeminiAnalysis:
        payload = await self.generate(prompt)
        analysis = parse_model_response(payload, self.model)
        if self.debug_logs:
            logger.debug("Gemini parsed analysis: %s", analysis.model_dump(exclude={"raw"}))
        return analysis
