from abc import ABC, abstractmethod


class BaseReasoningClient(ABC):
    """Contract for provider-specific reasoning (LLM) clients."""

    @abstractmethod
    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        schema_name: str,
        json_schema: dict[str, object],
    ) -> str:
        """Return provider response as plain text.

        Raises:
            CapabilityUnavailable: on network or provider API failures.
            MalformedCapabilityResponse: if the provider returned no content.
        """
