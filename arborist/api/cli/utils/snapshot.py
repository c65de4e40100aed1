"""Snapshot loading and service wiring for CLI commands."""

import json
from pathlib import Path

from openai import OpenAIError

from arborist.core.config.config import Config
from arborist.interfaces.classification_oracle import ClassificationOracle
from arborist.providers.database.memory_provider import InMemoryWorkItemStore
from arborist.providers.embeddings import create_embedding_provider
from arborist.providers.llm import create_classification_oracle
from arborist.services.embedding_service import EmbeddingService


class CLISetupError(Exception):
    """Raised when a command cannot be wired from its inputs."""


def load_snapshot(path: Path) -> InMemoryWorkItemStore:
    """Load a ``{"items": [...], "dependencies": [...]}`` snapshot file.

    Raises:
        CLISetupError: If the file is missing, unreadable or malformed
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise CLISetupError(f"Failed to read snapshot {path}: {e}") from e

    if not isinstance(data, dict):
        raise CLISetupError(f"Snapshot {path} must contain a JSON object")

    try:
        return InMemoryWorkItemStore.from_dict(data)
    except (KeyError, ValueError) as e:
        raise CLISetupError(f"Invalid snapshot {path}: {e}") from e


def build_embedding_service(config: Config) -> EmbeddingService:
    try:
        return EmbeddingService(create_embedding_provider(config.embedding))
    except OpenAIError as e:
        raise CLISetupError(
            f"Embedding provider not configured: {e}. "
            "Set ARBORIST_EMBEDDING_API_KEY or pass --no-embeddings."
        ) from e


def build_oracle(config: Config) -> ClassificationOracle:
    try:
        return create_classification_oracle(config.llm)
    except OpenAIError as e:
        raise CLISetupError(
            f"Classification model not configured: {e}. Set ARBORIST_LLM_API_KEY."
        ) from e
