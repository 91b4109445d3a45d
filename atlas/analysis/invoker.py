"""Runs one document through one analysis backend."""

import asyncio
import json
import time
from collections.abc import Mapping
from dataclasses import dataclass, field

from atlas.analysis.backends import Backend
from atlas.analysis.client_base import BaseAnalysisClient
from atlas.analysis.exceptions import AnalysisTimeoutError, BackendError, ParseError
from atlas.analysis.prompt_loader import load_system_prompt
from atlas.analysis.validator import build_snippets, extract_records
from atlas.documents.models import GroundingSource, Snippet
from atlas.logging.logger import Log


@dataclass(frozen=True)
class AnalysisResult:
    snippets: list[Snippet] = field(default_factory=list)
    grounding_sources: list[GroundingSource] = field(default_factory=list)


class AnalysisInvoker:
    """Truncates, submits and parses a single analysis call.

    Retrying is left to the scheduler; a failed call raises once.
    """

    def __init__(
        self,
        clients: Mapping[str, BaseAnalysisClient],
        *,
        timeout_seconds: float = 60.0,
        temperature: float = 0.1,
        system_prompt: str | None = None,
    ) -> None:
        self._clients = dict(clients)
        self._timeout_seconds = timeout_seconds
        self._temperature = temperature
        self._system_prompt = (
            system_prompt if system_prompt is not None else load_system_prompt()
        )

    async def analyze(
        self,
        content: str,
        document_id: str,
        document_name: str,
        backend: Backend,
    ) -> AnalysisResult:
        """Extract categorized snippets from document text.

        Only the first ``backend.input_capacity`` characters are submitted.

        Raises:
            AnalysisTimeoutError: if the call exceeds the timeout.
            BackendError: on a non-success backend response.
            ParseError: if the response body is not JSON.
        """
        client = self._clients.get(backend.provider)
        if client is None:
            raise BackendError(f"No client configured for provider '{backend.provider}'")

        truncated = truncate(content, backend.input_capacity)
        user_prompt = f"DOCUMENT NAME: {document_name}\n\nCONTENT:\n{truncated}"
        Log.debug(
            f"Analysis prompt for {document_name}: {len(truncated)} of "
            f"{len(content)} chars to {backend.provider} ({backend.model})"
        )

        try:
            async with asyncio.timeout(self._timeout_seconds):
                raw_response = await client.create_chat_completion(
                    model=backend.model,
                    temperature=self._temperature,
                    system_prompt=self._system_prompt,
                    user_prompt=user_prompt,
                )
        except TimeoutError as exc:
            raise AnalysisTimeoutError(
                f"Analysis of {document_name} timed out after "
                f"{self._timeout_seconds:g}s on {backend.model}"
            ) from exc

        try:
            parsed = json.loads(raw_response)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Invalid JSON response from {backend.model}: {exc}") from exc

        stamp = str(time.time_ns() // 1_000_000)
        snippets = build_snippets(extract_records(parsed), document_id, document_name, stamp)
        Log.info(f"Analysis of {document_name} complete: {len(snippets)} snippets extracted")
        return AnalysisResult(snippets=snippets, grounding_sources=[])


def truncate(content: str, input_capacity: int) -> str:
    return content[:input_capacity]
