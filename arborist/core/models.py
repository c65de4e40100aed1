"""Domain models for Arborist.

Plain dataclasses shared by the placement and retrieval services. Every
result type exposes ``to_dict()`` for JSON serialization by consumers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

KeywordType = Literal["single", "phrase"]
SuggestionSource = Literal["vector", "oracle", "create_new"]
MatchType = Literal["vector", "keyword", "hybrid"]
SearchMode = Literal["vector", "keyword", "hybrid"]
ScoringMethod = Literal["frequency", "tfidf", "weighted"]


class PlacementDecision(str, Enum):
    """Placement decision returned by the classification oracle."""

    ADD_AS_CHILD = "AddAsChild"
    CREATE_PARENT = "CreateParent"
    ADD_AS_ROOT = "AddAsRoot"


@dataclass
class WorkItem:
    """A node in the work item forest."""

    id: str
    title: str
    description: str | None = None
    vision: str | None = None
    parent_id: str | None = None
    done: bool = False
    embedding: list[float] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WorkItem:
        """Build a work item from a loosely-typed mapping (snake or camel case)."""
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            description=data.get("description"),
            vision=data.get("vision"),
            parent_id=data.get("parent_id", data.get("parentId")),
            done=bool(data.get("done", False)),
            embedding=data.get("embedding"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "vision": self.vision,
            "parent_id": self.parent_id,
            "done": self.done,
        }


@dataclass(frozen=True)
class ItemContent:
    """Text content of an item being analyzed or placed (no identity yet)."""

    title: str = ""
    description: str | None = None
    vision: str | None = None

    @classmethod
    def of(cls, item: ItemContent | WorkItem | dict[str, Any] | str) -> ItemContent:
        """Coerce the accepted content inputs into ItemContent."""
        if isinstance(item, ItemContent):
            return item
        if isinstance(item, str):
            return cls(title=item)
        if isinstance(item, WorkItem):
            return cls(item.title, item.description, item.vision)
        return cls(
            title=item.get("title") or "",
            description=item.get("description"),
            vision=item.get("vision"),
        )


@dataclass(frozen=True)
class KeywordTerm:
    """A scored single term or n-gram phrase."""

    term: str
    score: float
    frequency: int
    type: KeywordType
    positions: tuple[int, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "term": self.term,
            "score": self.score,
            "frequency": self.frequency,
            "type": self.type,
            "positions": list(self.positions),
        }


@dataclass
class Candidate:
    """A placement candidate produced by the vector ranker.

    ``similarity`` is the raw cosine similarity for plain and sibling
    candidates, and the composite cluster score for family candidates.
    """

    id: str
    title: str
    description: str | None
    similarity: float
    hierarchy_path: list[str]
    depth: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "similarity": self.similarity,
            "hierarchy_path": self.hierarchy_path,
            "depth": self.depth,
        }


@dataclass(frozen=True)
class SuggestedParent:
    title: str
    description: str


@dataclass
class ClassificationDecision:
    """Structured placement decision for a new item."""

    decision: PlacementDecision
    parent_id: str | None
    confidence: float
    reasoning: str
    suggested_parent: SuggestedParent | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "decision": self.decision.value,
            "parent_id": self.parent_id,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
        }
        if self.suggested_parent is not None:
            data["suggested_parent"] = {
                "title": self.suggested_parent.title,
                "description": self.suggested_parent.description,
            }
        return data


@dataclass
class Suggestion:
    """A presentation-ready parent suggestion (confidence on a 0-100 scale)."""

    id: str
    title: str
    description: str | None
    confidence: int
    source: SuggestionSource
    reasoning: str
    hierarchy_path: list[str]
    can_create_new_parent: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "confidence": self.confidence,
            "source": self.source,
            "reasoning": self.reasoning,
            "hierarchy_path": self.hierarchy_path,
            "can_create_new_parent": self.can_create_new_parent,
        }


@dataclass
class SearchResult:
    """A ranked retrieval hit."""

    id: str
    title: str
    score: float
    match_type: MatchType
    description: str | None = None
    vision: str | None = None
    similarity: float | None = None
    keyword_matches: list[str] | None = None
    hierarchy_path: list[str] = field(default_factory=list)
    depth: int = 0
    done: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "vision": self.vision,
            "score": self.score,
            "match_type": self.match_type,
            "similarity": self.similarity,
            "keyword_matches": self.keyword_matches,
            "hierarchy_path": self.hierarchy_path,
            "depth": self.depth,
            "done": self.done,
        }


@dataclass
class SimilarityMatch:
    """A flat row returned by the vector store after shape normalization."""

    id: str
    title: str
    description: str | None
    similarity: float


@dataclass
class ValidationReport:
    """Non-blocking validation outcome for a decision or suggestion."""

    is_valid: bool
    warnings: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "warnings": self.warnings,
            "recommendations": self.recommendations,
        }


@dataclass(frozen=True)
class ParentRef:
    id: str
    title: str


@dataclass(frozen=True)
class NewParentSuggestion:
    title: str
    description: str
    reasoning: str


@dataclass
class PlacementResult:
    """Best-parent view of a classification decision."""

    best_parent: ParentRef | None
    confidence: float
    reasoning: str
    suggested_new_parent: NewParentSuggestion | None = None
    analysis: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "best_parent": (
                {"id": self.best_parent.id, "title": self.best_parent.title}
                if self.best_parent
                else None
            ),
            "confidence": self.confidence,
            "reasoning": self.reasoning,
        }
        if self.suggested_new_parent is not None:
            data["suggested_new_parent"] = {
                "title": self.suggested_new_parent.title,
                "description": self.suggested_new_parent.description,
                "reasoning": self.suggested_new_parent.reasoning,
            }
        if self.analysis is not None:
            data["analysis"] = self.analysis
        return data
