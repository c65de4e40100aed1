"""Service layer for Arborist - placement and retrieval orchestration."""

from .analysis_service import AnalysisOptions, AnalysisService, quick_analyze
from .classification_service import ClassificationService
from .embedding_service import EmbeddingService
from .parent_suggestion_service import ParentSuggestionService, SuggestionsResult
from .path_resolver import PathResolver
from .placement_service import PlacementService
from .search_service import ActionSearchService, SearchResponse
from .vector_placement_service import VectorPlacementResult, VectorPlacementService
from .vector_search import VectorSearchService

__all__ = [
    "ActionSearchService",
    "AnalysisOptions",
    "AnalysisService",
    "ClassificationService",
    "EmbeddingService",
    "ParentSuggestionService",
    "PathResolver",
    "PlacementService",
    "SearchResponse",
    "SuggestionsResult",
    "VectorPlacementResult",
    "VectorPlacementService",
    "VectorSearchService",
    "quick_analyze",
]
