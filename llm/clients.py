"""
Text-generator clients. Both expose generate(prompt) -> str and raise
NoCandidateError / NetworkError; nothing else in the pipeline knows which provider is used.
Gemini is called over its REST generateContent endpoint; Groq through its SDK.
"""
import logging
from typing import Any, Dict, Optional

import groq
import httpx

from utils.config import DEFAULT_GEMINI_ENDPOINT, DEFAULT_GROQ_MODEL, Settings
from utils.errors import ConfigError, NetworkError, NoCandidateError, RetryableNetworkError
from utils.retry import retry_with_backoff

logger = logging.getLogger(__name__)


class TextClient:
    """Interface for a single-prompt text generator."""

    def generate(self, prompt: str) -> str:
        raise NotImplementedError


class GeminiClient(TextClient):
    """Gemini generateContent over HTTP with the API key in the X-goog-api-key header."""

    def __init__(
        self,
        api_key: str,
        endpoint: str = DEFAULT_GEMINI_ENDPOINT,
        timeout: float = 30.0,
        max_retries: int = 0,
        initial_delay: float = 1.0,
        backoff_factor: float = 2.0,
        http_client: Optional[httpx.Client] = None,
    ):
        if not api_key:
            raise ConfigError("GOOGLE_API_KEY is not set")
        self.api_key = api_key
        self.endpoint = endpoint
        self.timeout = timeout
        self._http = http_client or httpx.Client(timeout=timeout)
        self._post = retry_with_backoff(
            max_retries=max_retries,
            initial_delay=initial_delay,
            backoff_factor=backoff_factor,
        )(self._post_once)

    def _post_once(self, body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self._http.post(
                self.endpoint,
                json=body,
                headers={"X-goog-api-key": self.api_key, "Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except httpx.TransportError as e:
            raise RetryableNetworkError(f"Gemini request failed: {e}") from e

        status = response.status_code
        if status == 429 or status >= 500:
            raise RetryableNetworkError(f"Gemini API returned HTTP {status}")
        if status >= 400:
            raise NetworkError(f"Gemini API returned HTTP {status}: {response.text[:200]}")
        try:
            return response.json()
        except ValueError as e:
            raise NetworkError("Gemini API returned a non-JSON body") from e

    def generate(self, prompt: str) -> str:
        """POST the prompt; return the first candidate's parts joined by spaces."""
        data = self._post({"contents": [{"parts": [{"text": prompt}]}]})
        candidates = data.get("candidates") if isinstance(data, dict) else None
        if not candidates:
            raise NoCandidateError("No candidates returned from Gemini API")
        first = candidates[0] if isinstance(candidates[0], dict) else {}
        parts = (first.get("content") or {}).get("parts") or []
        return " ".join(str(p.get("text", "")) for p in parts if isinstance(p, dict)).strip()


class GroqClient(TextClient):
    """Groq chat completion with the whole prompt as a single user message."""

    def __init__(self, api_key: str, model: str = DEFAULT_GROQ_MODEL, timeout: float = 30.0,
                 max_retries: int = 0, client=None):
        if client is None:
            if not api_key:
                raise ConfigError("GROQ_API_KEY is not set")
            client = groq.Groq(api_key=api_key, timeout=timeout, max_retries=max_retries)
        self._client = client
        self.model = model

    def generate(self, prompt: str) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0,
            )
        except groq.APIError as e:
            raise NetworkError(f"Groq request failed: {e}") from e
        if not response.choices:
            raise NoCandidateError("No choices returned from Groq API")
        return (response.choices[0].message.content or "").strip()


def build_text_client(settings: Settings) -> TextClient:
    """Create the client for settings.llm_provider ("gemini" or "groq")."""
    provider = settings.llm_provider
    if provider == "gemini":
        return GeminiClient(
            api_key=settings.google_api_key,
            endpoint=settings.gemini_endpoint,
            timeout=settings.llm_timeout_seconds,
            max_retries=settings.llm_max_retries,
            initial_delay=settings.llm_retry_initial_delay,
            backoff_factor=settings.llm_retry_backoff_factor,
        )
    if provider == "groq":
        return GroqClient(
            api_key=settings.groq_api_key,
            model=settings.groq_model,
            timeout=settings.llm_timeout_seconds,
            max_retries=settings.llm_max_retries,
        )
    raise ConfigError(f"Unknown LLM_PROVIDER {provider!r} (expected 'gemini' or 'groq')")
