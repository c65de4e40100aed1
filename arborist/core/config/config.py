"""Aggregate configuration for Arborist.

Precedence (highest first): CLI overrides, JSON config file, environment
variables (ARBORIST_*), defaults. Environment variables are applied by the
individual pydantic-settings classes; file and CLI values are passed as
init kwargs and therefore win.
"""

import argparse
import json
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, Field

from .embedding_config import EmbeddingConfig
from .llm_config import LLMConfig
from .logging_config import LoggingConfig
from .placement_config import PlacementConfig
from .search_config import SearchConfig


class Config(BaseModel):
    """Top-level configuration container."""

    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    placement: PlacementConfig = Field(default_factory=PlacementConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_sources(
        cls,
        config_file: Path | str | None = None,
        args: argparse.Namespace | None = None,
    ) -> "Config":
        """Build a config from an optional JSON file and parsed CLI args.

        Args:
            config_file: Path to a JSON config file with optional sections
                ``embedding``, ``llm``, ``placement``, ``search``, ``logging``
            args: Parsed CLI arguments carrying overrides

        Returns:
            Validated Config

        Raises:
            ValueError: If the file cannot be read or a value fails validation
        """
        sections: dict[str, dict[str, Any]] = {}
        if config_file is not None:
            sections = _load_config_file(Path(config_file))

        if args is not None:
            _merge(sections, "embedding", EmbeddingConfig.extract_cli_overrides(args))
            _merge(sections, "logging", LoggingConfig.extract_cli_overrides(args) or {})

        return cls(
            embedding=EmbeddingConfig(**sections.get("embedding", {})),
            llm=LLMConfig(**sections.get("llm", {})),
            placement=PlacementConfig(**sections.get("placement", {})),
            search=SearchConfig(**sections.get("search", {})),
            logging=LoggingConfig(**sections.get("logging", {})),
        )


def _load_config_file(path: Path) -> dict[str, dict[str, Any]]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ValueError(f"Failed to load config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")

    known = {"embedding", "llm", "placement", "search", "logging"}
    unknown = set(data) - known
    if unknown:
        logger.warning(f"Ignoring unknown config sections: {sorted(unknown)}")

    return {key: dict(value) for key, value in data.items() if key in known}


def _merge(sections: dict[str, dict[str, Any]], name: str, overrides: dict[str, Any]) -> None:
    if not overrides:
        return
    section = sections.setdefault(name, {})
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(section.get(key), dict):
            section[key] = {**section[key], **value}
        else:
            section[key] = value
