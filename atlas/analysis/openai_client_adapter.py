import httpx
import openai

from atlas.analysis.client_base import BaseAnalysisClient
from atlas.analysis.exceptions import AnalysisTimeoutError, BackendError, ParseError


class OpenAIClientAdapter(BaseAnalysisClient):
    """Analysis client adapter built on an OpenAI-compatible chat API."""

    def __init__(
        self,
        *,
        provider_name: str,
        api_key: str,
        timeout_seconds: float,
        base_url: str | None = None,
    ) -> None:
        self._provider_name = provider_name
        self._client: openai.AsyncOpenAI | None = None
        if api_key:
            self._client = openai.AsyncOpenAI(
                api_key=api_key,
                timeout=timeout_seconds,
                base_url=base_url,
                max_retries=0,
            )

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        label = f"{self._provider_name.capitalize()} Error ({model})"
        if self._client is None:
            raise BackendError(f"{label}: API key is not configured")
        try:
            response = await self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except (openai.APITimeoutError, httpx.TimeoutException) as exc:
            raise AnalysisTimeoutError(f"{label}: request timed out") from exc
        except openai.APIStatusError as exc:
            detail = _backend_message(exc.body) or (
                f"request failed with status {exc.status_code}"
            )
            raise BackendError(f"{label}: {detail}") from exc
        except (openai.APIConnectionError, httpx.HTTPError) as exc:
            raise BackendError(f"{label}: connection failed: {exc}") from exc
        except openai.APIError as exc:
            raise BackendError(f"{label}: {exc}") from exc

        if not response.choices:
            raise ParseError(f"{label}: AI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise ParseError(f"{label}: AI returned empty response")
        return content


def _backend_message(body: object) -> str | None:
    """Pull the provider's own error message out of an error body."""
    if not isinstance(body, dict):
        return None
    message = body.get("message")
    if isinstance(message, str) and message:
        return message
    nested = body.get("error")
    if isinstance(nested, dict):
        message = nested.get("message")
        if isinstance(message, str) and message:
            return message
    return None
