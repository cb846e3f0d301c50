import httpx
import openai

from intake.analysis.client_base import BaseReasoningClient
from intake.capabilities.exceptions import (
    CapabilityTimeout,
    CapabilityUnavailable,
    MalformedCapabilityResponse,
)
from intake.logging.logger import Log


class OpenAIClientAdapter(BaseReasoningClient):
    """Reasoning client for any OpenAI-compatible chat completions endpoint.

    Requests strict structured output, so a well-behaved provider answers
    with JSON matching ``json_schema`` or with an explicit refusal.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

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
        response_format = {
            "type": "json_schema",
            "json_schema": {"name": schema_name, "strict": True, "schema": json_schema},
        }
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                response_format=response_format,  # type: ignore[arg-type]
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except (openai.APITimeoutError, httpx.TimeoutException) as exc:
            raise CapabilityTimeout(f"{model} timed out on {schema_name}") from exc
        except (openai.APIConnectionError, httpx.ConnectError) as exc:
            raise CapabilityUnavailable(f"AI provider network error: {exc}") from exc
        except openai.RateLimitError as exc:
            raise CapabilityUnavailable(f"AI provider API error: rate limited ({exc})") from exc
        except openai.APIError as exc:
            raise CapabilityUnavailable(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise MalformedCapabilityResponse(f"{schema_name}: provider returned no choices")
        choice = response.choices[0]
        refusal = getattr(choice.message, "refusal", None)
        if refusal:
            raise MalformedCapabilityResponse(f"{schema_name}: model refused ({refusal})")
        if choice.finish_reason == "length":
            raise MalformedCapabilityResponse(f"{schema_name}: response truncated")
        if not choice.message.content:
            raise MalformedCapabilityResponse(f"{schema_name}: provider returned empty response")

        usage = getattr(response, "usage", None)
        if usage is not None:
            Log.debug(
                f"{schema_name} completion",
                model=model,
                prompt_tokens=usage.prompt_tokens,
                completion_tokens=usage.completion_tokens,
            )
        return choice.message.content
