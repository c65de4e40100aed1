"""Configuration models for Arborist."""

from .config import Config
from .embedding_config import EmbeddingConfig
from .llm_config import LLMConfig
from .logging_config import FileLoggingConfig, LoggingConfig
from .placement_config import PlacementConfig
from .search_config import SearchConfig

__all__ = [
    "Config",
    "EmbeddingConfig",
    "FileLoggingConfig",
    "LLMConfig",
    "LoggingConfig",
    "PlacementConfig",
    "SearchConfig",
]
