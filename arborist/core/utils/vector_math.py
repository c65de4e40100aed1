"""Vector math helpers for embedding comparison."""

from collections.abc import Sequence

import numpy as np


def cosine_similarity(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> float:
    """Cosine similarity of two vectors.

    Returns 0.0 when the dimensions differ, either vector is empty, or either
    vector has zero magnitude.
    """
    vec_a = np.asarray(a, dtype=np.float64)
    vec_b = np.asarray(b, dtype=np.float64)

    if vec_a.ndim != 1 or vec_a.shape != vec_b.shape or vec_a.size == 0:
        return 0.0

    norm_a = float(np.linalg.norm(vec_a))
    norm_b = float(np.linalg.norm(vec_b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    similarity = float(np.dot(vec_a, vec_b) / (norm_a * norm_b))
    if np.isnan(similarity):
        return 0.0
    return similarity


def l2_normalize(vector: list[float]) -> list[float]:
    """L2-normalize vector to unit length for cosine similarity.

    Args:
        vector: Input vector to normalize

    Returns:
        Unit-length vector (or original if zero-magnitude)
    """
    arr = np.asarray(vector, dtype=np.float64)
    magnitude = float(np.linalg.norm(arr))
    if magnitude > 0:
        return (arr / magnitude).tolist()
    return vector
