"""Completion gateway: the single boundary to the Gemini service via LiteLLM.

Every outbound request in the package goes through CompletionGateway.complete.
One call issues exactly one request; there is no retry loop. Failures are
logged, then translated into AuditorError with a TRANSPORT classification.
"""

import logging
from typing import Any

import litellm

from portfolio_auditor.errors import AuditorError, ErrorKind
from portfolio_auditor.llm.schemas import SchemaNode
from portfolio_auditor.models.llm_config import API_KEY_ENV_VARS, LLMConfig, ModelTier

logger = logging.getLogger(__name__)

# Gemini's built-in retrieval tool, as accepted by LiteLLM
GOOGLE_SEARCH_TOOL: dict[str, Any] = {"googleSearch": {}}

EMPTY_RESPONSE_MESSAGE = "Empty response from AI. The model may be overloaded."


class CompletionGateway:
    """Client for the hosted completion service.

    The credential is validated at construction, before any prompt is built
    or any request is attempted.
    """

    def __init__(self, config: LLMConfig) -> None:
        """Initialize the gateway.

        Args:
            config: LLM configuration carrying the credential and model names

        Raises:
            AuditorError: CONFIGURATION if the API key is missing
        """
        if not config.has_credential:
            raise AuditorError(
                "API key is missing. Set one of "
                f"{', '.join(API_KEY_ENV_VARS)} or llm.api_key in the configuration.",
                ErrorKind.CONFIGURATION,
            )
        self.config = config

    def complete(
        self,
        prompt: str,
        *,
        tier: ModelTier,
        system_prompt: str | None = None,
        response_schema: SchemaNode | None = None,
        grounding: bool = False,
        require_content: bool = True,
    ) -> str:
        """Send one completion request and return the raw response text.

        Args:
            prompt: Task prompt
            tier: Model tier to use
            system_prompt: Optional system instruction
            response_schema: Constrain output to this schema (JSON mode)
            grounding: Attach Google Search retrieval augmentation
            require_content: Treat a blank payload as a failure; when False the
                blank text is returned for the caller to normalize

        Returns:
            Response text (non-empty unless require_content is False)

        Raises:
            AuditorError: TRANSPORT on service failure or empty payload
        """
        model = self.config.get_litellm_model_name(tier)

        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        completion_kwargs: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
            "timeout": self.config.timeout,
            "api_key": self.config.api_key,
        }

        if response_schema is not None:
            completion_kwargs["response_format"] = {
                "type": "json_object",
                "response_schema": response_schema.to_schema(),
            }

        if grounding:
            completion_kwargs["tools"] = [GOOGLE_SEARCH_TOOL]

        logger.debug(
            "Requesting completion from %s (schema=%s, grounding=%s, %d prompt chars)",
            model,
            response_schema is not None,
            grounding,
            len(prompt),
        )

        try:
            response = litellm.completion(**completion_kwargs)
        except litellm.exceptions.AuthenticationError as e:
            raise self._failure(model, tier, f"Authentication failed for Gemini: {e}", e) from e
        except litellm.exceptions.RateLimitError as e:
            raise self._failure(model, tier, f"Rate limit exceeded for Gemini: {e}", e) from e
        except litellm.exceptions.Timeout as e:
            raise self._failure(model, tier, f"Request to Gemini timed out: {e}", e) from e
        except litellm.exceptions.APIConnectionError as e:
            raise self._failure(model, tier, f"Connection failed to Gemini: {e}", e) from e
        except Exception as e:
            raise self._failure(model, tier, f"Completion request failed: {e}", e) from e

        content = _extract_content(response)
        if require_content and not content.strip():
            raise self._failure(model, tier, EMPTY_RESPONSE_MESSAGE)

        usage = getattr(response, "usage", None)
        if usage:
            logger.debug(
                "Completion from %s: %d prompt tokens, %d completion tokens",
                model,
                usage.prompt_tokens or 0,
                usage.completion_tokens or 0,
            )

        return content

    def _failure(
        self,
        model: str,
        tier: ModelTier,
        message: str,
        cause: BaseException | None = None,
    ) -> AuditorError:
        """Log a failed request and build the classified error."""
        logger.error(
            "Completion request to %s (%s tier) failed: %s",
            model,
            tier.value,
            cause if cause is not None else message,
            extra={
                "extra_data": {
                    "model": model,
                    "tier": tier.value,
                    "error_type": type(cause).__name__ if cause else "EmptyResponse",
                }
            },
        )
        return AuditorError(message, ErrorKind.TRANSPORT, cause=cause)


def _extract_content(response: Any) -> str:
    """Pull the message text out of a LiteLLM response, tolerating gaps."""
    choices = getattr(response, "choices", None)
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    if message is None:
        return ""
    return message.content or ""
