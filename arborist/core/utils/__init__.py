"""Core utilities package."""

from .result_shapes import normalize_rows, row_value
from .vector_math import cosine_similarity, l2_normalize

__all__ = [
    "cosine_similarity",
    "l2_normalize",
    "normalize_rows",
    "row_value",
]
