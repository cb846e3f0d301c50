from typing import ClassVar

from intake.analysis.capability import BaseClassificationCapability
from intake.analysis.example_client_adapter import ExampleClientAdapter
from intake.analysis.openai_client_adapter import OpenAIClientAdapter
from intake.analysis.reasoning_capability import ReasoningCapability
from intake.config.settings import Settings


class ClassificationCapabilityFactory:
    """Creates the configured classification capability."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseClassificationCapability:
        provider = settings.analysis_provider.lower()
        if provider == "example":
            return ReasoningCapability(client=ExampleClientAdapter(), model="example")

        client = OpenAIClientAdapter(
            api_key=cls._resolve_api_key(provider, settings),
            timeout_seconds=settings.analysis_openai_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )
        return ReasoningCapability(
            client=client,
            model=cls._resolve_model_name(provider, settings),
            temperature=settings.analysis_openai_temperature if provider == "openai" else 0.0,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.analysis_openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "analysis_openai_compatible_base_url is required for "
                    "analysis_provider=openai_compatible"
                )
            return url
        base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if base_url is None:
            supported = [
                "example",
                "openai",
                "openai_compatible",
                *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
            ]
            raise ValueError(f"Unknown analysis provider '{provider}'. Choose from: {supported}")
        return base_url

    @staticmethod
    def _resolve_api_key(provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.analysis_openai_api_key,
            "openai_compatible": settings.analysis_openai_compatible_api_key,
            "openrouter": settings.analysis_openrouter_api_key,
            "groq": settings.analysis_groq_api_key,
            "ollama": settings.analysis_ollama_api_key,
        }
        return key_map.get(provider, "")

    @staticmethod
    def _resolve_model_name(provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.analysis_openai_model_name,
            "openai_compatible": settings.analysis_openai_compatible_model_name,
            "openrouter": settings.analysis_openrouter_model_name,
            "groq": settings.analysis_groq_model_name,
            "ollama": settings.analysis_ollama_model_name,
        }
        return key_map.get(provider, "")
