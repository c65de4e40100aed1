"""LLM-backed oracles for Arborist."""

from arborist.core.config.llm_config import LLMConfig
from arborist.interfaces.classification_oracle import ClassificationOracle

from .openai_oracle import OpenAIClassificationOracle


def create_classification_oracle(config: LLMConfig) -> ClassificationOracle:
    """Build the classification oracle selected by ``config.provider``."""
    return OpenAIClassificationOracle(**config.get_provider_config())


__all__ = ["OpenAIClassificationOracle", "create_classification_oracle"]
