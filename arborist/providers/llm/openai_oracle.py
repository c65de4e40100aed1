"""OpenAI-compatible classification oracle.

Uses the Chat Completions API with JSON Schema structured outputs and
temperature 0 to obtain one placement decision per call. No retry is added
on top of the client's own transport retries.
"""

import json
from typing import Any

from loguru import logger
from openai import AsyncOpenAI

from arborist.core.constants import OPENAI_DEFAULT_CLASSIFICATION_MODEL
from arborist.core.exceptions import ClassificationError
from arborist.core.models import ClassificationDecision, ItemContent
from arborist.prompts.classification import (
    CLASSIFICATION_JSON_SCHEMA,
    HierarchyNode,
    build_classification_prompt,
    parse_classification_response,
)


class OpenAIClassificationOracle:
    """Classification oracle backed by an OpenAI-compatible chat model."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = OPENAI_DEFAULT_CLASSIFICATION_MODEL,
        base_url: str | None = None,
        timeout: int = 60,
        max_retries: int = 3,
        max_completion_tokens: int = 1024,
        client: AsyncOpenAI | None = None,
    ):
        """Initialize the oracle.

        Args:
            api_key: API key (defaults to OPENAI_API_KEY in the client)
            model: Chat model name
            base_url: Base URL for OpenAI-compatible endpoints
            timeout: Request timeout in seconds
            max_retries: Transport retries handled by the client
            max_completion_tokens: Output budget per decision
            client: Pre-built client (used by tests)
        """
        self._model = model
        self._timeout = timeout
        self._max_completion_tokens = max_completion_tokens
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
        )

        self._requests_made = 0
        self._tokens_used = 0

    @property
    def name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        return self._model

    async def classify(
        self,
        item: ItemContent,
        hierarchy: list[HierarchyNode],
        confidence_threshold: float = 0.7,
    ) -> ClassificationDecision:
        """Ask the model for a placement decision.

        Raises:
            ClassificationError: On API failure, truncation, empty or invalid output
        """
        system, prompt = build_classification_prompt(
            item, hierarchy, confidence_threshold
        )
        payload = await self._complete_structured(prompt, system)
        return parse_classification_response(payload)

    async def _complete_structured(self, prompt: str, system: str) -> dict[str, Any]:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                max_completion_tokens=self._max_completion_tokens,
                temperature=0,
                timeout=self._timeout,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": "placement_decision",
                        "strict": True,
                        "schema": CLASSIFICATION_JSON_SCHEMA,
                    },
                },
            )
        except Exception as e:
            logger.error(f"{self.name} classification request failed: {e}")
            raise ClassificationError(f"Classification request failed: {e}") from e

        self._requests_made += 1
        if response.usage:
            self._tokens_used += response.usage.total_tokens

        content = response.choices[0].message.content
        finish_reason = response.choices[0].finish_reason

        if content is None or not content.strip():
            raise ClassificationError(
                f"Classification returned empty response (finish_reason={finish_reason})"
            )

        if finish_reason == "length":
            raise ClassificationError(
                "Classification response truncated - token limit exceeded"
            )

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse classification output as JSON: {e}")
            raise ClassificationError(f"Invalid JSON in classification output: {e}") from e

        if not isinstance(parsed, dict):
            raise ClassificationError("Classification output must be a JSON object")
        return parsed
