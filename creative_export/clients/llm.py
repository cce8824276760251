"""Generic LLM client with provider-agnostic interface."""

import logging

from openai import OpenAI, OpenAIError

from ..config import LOCALIZER_MODEL
from ..errors import UpstreamError

logger = logging.getLogger(__name__)


class LLMClient:
    """Generic LLM client. Currently uses OpenAI, interface is provider-agnostic."""

    def __init__(self, api_key: str, model: str = LOCALIZER_MODEL, timeout: float = 60.0):
        self._client = OpenAI(api_key=api_key, timeout=timeout)
        self.model = model
        self.total_input_tokens = 0
        self.total_output_tokens = 0

    def call(self, system_prompt: str, user_message: str, label: str = "") -> str:
        """Make LLM call and return response text.

        Args:
            system_prompt: System/developer prompt.
            user_message: User message.
            label: Optional label for logging token usage.

        Returns:
            Response text content.

        Raises:
            UpstreamError: If the provider call fails.
        """
        try:
            response = self._client.responses.create(
                model=self.model,
                input=[
                    {"role": "developer", "content": system_prompt},
                    {"role": "user", "content": user_message},
                ],
                reasoning={"effort": "low"},
            )
        except OpenAIError as e:
            raise UpstreamError("openai", str(e)) from e

        # Track tokens
        usage = response.usage
        if usage is not None:
            self.total_input_tokens += usage.input_tokens
            self.total_output_tokens += usage.output_tokens
            if label:
                logger.info(f"{label}: input={usage.input_tokens}, output={usage.output_tokens}")

        return response.output_text.strip()

    def get_token_totals(self) -> tuple[int, int]:
        """Return accumulated (input, output) tokens."""
        return self.total_input_tokens, self.total_output_tokens
