from abc import ABC, abstractmethod


class BaseAnalysisClient(ABC):
    """Contract for provider-specific analysis AI clients."""

    @abstractmethod
    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        """Return the provider response body as plain text.

        Raises:
            AnalysisTimeoutError: when the provider call times out.
            BackendError: on a non-success response or transport failure.
            ParseError: when the provider returns no message content.
        """
