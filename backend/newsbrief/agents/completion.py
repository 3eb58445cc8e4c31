"""Chat completion backends used by the summary agent."""

from dataclasses import dataclass
from typing import Any, Protocol

import anthropic
import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from newsbrief.exceptions import CompletionError


@dataclass
class Completion:
    """Text and token usage of one completion. Providers may omit usage."""

    text: str | None
    prompt_tokens: int | None = None
    completion_tokens: int | None = None


class CompletionClient(Protocol):
    model: str

    async def complete(
        self,
        system: str,
        prompt: str,
        max_tokens: int = 300,
        temperature: float = 0.3,
    ) -> Completion: ...


class OpenAICompatibleClient:
    """Chat-completions endpoint (OpenAI wire format) over httpx."""

    DEFAULT_MODEL = "gpt-4o-mini"

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        base_url: str = "https://api.openai.com/v1",
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 30.0,
    ):
        self.api_key = api_key
        self.model = model or self.DEFAULT_MODEL
        self.url = f"{base_url.rstrip('/')}/chat/completions"
        self.http = http_client or httpx.AsyncClient(timeout=timeout_seconds)
        self.max_attempts = 3

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with attempt:
                return await self.http.post(
                    self.url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        raise CompletionError("Completion request was not attempted")

    async def complete(
        self,
        system: str,
        prompt: str,
        max_tokens: int = 300,
        temperature: float = 0.3,
    ) -> Completion:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        try:
            response = await self._post(payload)
        except httpx.HTTPError as e:
            raise CompletionError(f"Completion request failed: {e}") from e

        if response.is_error:
            raise CompletionError(f"Completion API error: {response.status_code} - {response.text[:500]}")

        try:
            data = response.json()
        except ValueError as e:
            raise CompletionError(f"Completion API returned invalid JSON: {e}") from e

        # Some gateways answer 200 with an error object in the body
        if data.get("error"):
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise CompletionError(f"Completion API error: {message}")

        choices = data.get("choices") or []
        text = ((choices[0].get("message") or {}).get("content")) if choices else None
        usage = data.get("usage") or {}
        return Completion(
            text=text,
            prompt_tokens=usage.get("prompt_tokens"),
            completion_tokens=usage.get("completion_tokens"),
        )

    async def close(self) -> None:
        await self.http.aclose()


class AnthropicClient:
    """Claude messages API."""

    DEFAULT_MODEL = "claude-sonnet-4-20250514"

    def __init__(self, api_key: str, model: str | None = None, client: Any = None):
        self.model = model or self.DEFAULT_MODEL
        self.client = client or anthropic.AsyncAnthropic(api_key=api_key)

    async def complete(
        self,
        system: str,
        prompt: str,
        max_tokens: int = 300,
        temperature: float = 0.3,
    ) -> Completion:
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            raise CompletionError(f"Anthropic API error: {e}") from e

        text = response.content[0].text if response.content else None
        usage = getattr(response, "usage", None)
        return Completion(
            text=text,
            prompt_tokens=getattr(usage, "input_tokens", None),
            completion_tokens=getattr(usage, "output_tokens", None),
        )

    async def close(self) -> None:
        await self.client.close()


class GeminiClient:
    """Gemini generate_content API."""

    DEFAULT_MODEL = "gemini-2.0-flash"

    def __init__(self, api_key: str, model: str | None = None, client: Any = None):
        self.model = model or self.DEFAULT_MODEL
        self.client = client or genai.Client(api_key=api_key)

    async def complete(
        self,
        system: str,
        prompt: str,
        max_tokens: int = 300,
        temperature: float = 0.3,
    ) -> Completion:
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    system_instruction=system,
                    temperature=temperature,
                    max_output_tokens=max_tokens,
                ),
            )
        except genai_errors.APIError as e:
            raise CompletionError(f"Gemini API error: {e}") from e

        usage = getattr(response, "usage_metadata", None)
        return Completion(
            text=response.text,
            prompt_tokens=getattr(usage, "prompt_token_count", None),
            completion_tokens=getattr(usage, "candidates_token_count", None),
        )

    async def close(self) -> None:
        pass
