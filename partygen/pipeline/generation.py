"""Generation port: the only seam to the remote content backend.

Wraps an LLMProvider and collapses its error surface into two outcomes
the retry controller understands: transient (try again) and permanent
(stop trying).
"""

import asyncio
import logging
from typing import Any

from pydantic import BaseModel

from partygen.content.prompts import PromptSpec
from partygen.llm.base import LLMProvider
from partygen.llm.exceptions import (
    LLMError,
    ProviderError,
    RateLimitError,
    StructuredOutputError,
)
from partygen.llm.message_types import Message
from partygen.pipeline.exceptions import (
    PermanentGenerationError,
    TransientGenerationError,
)

logger = logging.getLogger(__name__)


class GenerationPort:
    """Calls the backend with a prompt and an output schema.

    The returned payload is the backend's decoded JSON and is never
    trusted to match the schema; that is the validation gate's job.

    Args:
        provider: Backend provider.
        model: Model override (provider default when None).
        max_tokens: Output token cap.
        temperature: Sampling temperature.
    """

    def __init__(
        self,
        provider: LLMProvider,
        model: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 1.0,
    ) -> None:
        self._provider = provider
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature

    @property
    def provider_name(self) -> str:
        return self._provider.provider_name

    async def generate(self, prompt: PromptSpec, output_schema: type[BaseModel]) -> Any:
        """Request one payload from the backend.

        Args:
            prompt: Instruction and system prompt.
            output_schema: Pydantic model describing the payload.

        Returns:
            Decoded payload (usually a dict).

        Raises:
            TransientGenerationError: Network, rate-limit, empty or
                undecodable response, retryable provider errors.
            PermanentGenerationError: Authentication and other
                non-retryable provider errors.
        """
        try:
            response = await self._provider.complete_structured(
                messages=[Message.user(prompt.instruction)],
                response_schema=output_schema,
                model=self._model,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
                system_prompt=prompt.system_prompt,
            )
        except StructuredOutputError as e:
            raise TransientGenerationError(f"Unusable response: {e}") from e
        except RateLimitError as e:
            raise TransientGenerationError(str(e), retry_after=e.retry_after) from e
        except ProviderError as e:
            if e.is_retryable:
                raise TransientGenerationError(str(e)) from e
            raise PermanentGenerationError(str(e)) from e
        except LLMError as e:
            raise PermanentGenerationError(str(e)) from e
        except (OSError, asyncio.TimeoutError) as e:
            raise TransientGenerationError(f"Network failure: {e}") from e
        except Exception as e:
            # Unknown SDK failures count as transient
            logger.warning(
                f"Unexpected {type(e).__name__} from {self.provider_name}: {e}",
                exc_info=True,
            )
            raise TransientGenerationError(f"{type(e).__name__}: {e}") from e

        if response.parsed_content is None:
            raise TransientGenerationError("Backend returned an empty response")
        return response.parsed_content
