from typing import ClassVar

from atlas.analysis.backends import BackendRotation
from atlas.analysis.client_base import BaseAnalysisClient
from atlas.analysis.example_client_adapter import ExampleClientAdapter
from atlas.analysis.invoker import AnalysisInvoker
from atlas.analysis.openai_client_adapter import OpenAIClientAdapter
from atlas.config.settings import Settings


class AnalysisClientFactory:
    """Creates one configured client per provider in the rotation."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "groq": "https://api.groq.com/openai/v1",
        "mistral": "https://api.mistral.ai/v1",
        "codestral": "https://codestral.mistral.ai/v1",
    }

    @classmethod
    def create(cls, provider: str, settings: Settings) -> BaseAnalysisClient:
        """Create the client for a single provider."""
        provider = provider.lower()
        if provider == "example" or settings.analysis_provider_override.lower() == "example":
            return ExampleClientAdapter()
        return OpenAIClientAdapter(
            provider_name=provider,
            api_key=cls._resolve_api_key(provider, settings),
            timeout_seconds=settings.analysis_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def create_all(
        cls, providers: set[str], settings: Settings
    ) -> dict[str, BaseAnalysisClient]:
        return {provider: cls.create(provider, settings) for provider in sorted(providers)}

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str:
        overrides = {
            "groq": settings.groq_base_url,
            "mistral": settings.mistral_base_url,
            "codestral": settings.codestral_base_url,
            "openai_compatible": settings.openai_compatible_base_url,
        }
        url = (overrides.get(provider) or "").strip()
        if url:
            return url
        if provider == "openai_compatible":
            raise ValueError(
                "openai_compatible_base_url is required for provider openai_compatible"
            )
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = ["example", "openai_compatible", *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS)]
        raise ValueError(f"Unknown analysis provider '{provider}'. Choose from: {supported}")

    @classmethod
    def _resolve_api_key(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "groq": settings.groq_api_key,
            "mistral": settings.mistral_api_key,
            "codestral": settings.codestral_api_key,
            "openai_compatible": settings.openai_compatible_api_key,
        }
        return key_map.get(provider, "") or ""


def build_invoker(settings: Settings, rotation: BackendRotation) -> AnalysisInvoker:
    """Build an AnalysisInvoker with a client for every provider in the rotation."""
    clients = AnalysisClientFactory.create_all(rotation.providers, settings)
    return AnalysisInvoker(
        clients,
        timeout_seconds=settings.analysis_timeout_seconds,
        temperature=settings.analysis_temperature,
    )
