"""
Cosine similarity ranking.

Dependencies: numpy
System role: Scoring step of vector retrieval
"""

from typing import Sequence, TypeVar

import numpy as np

from salesdesk.core.exceptions import RetrievalError

T = TypeVar("T")


def cosine_similarities(query: Sequence[float], vectors: Sequence[Sequence[float]]) -> np.ndarray:
    """
    Cosine similarity of the query against each vector.

    Zero-norm vectors score 0.0.

    Raises:
        RetrievalError: When a vector's dimension differs from the query's
    """
    query_vec = np.asarray(query, dtype=np.float64)
    for vector in vectors:
        if len(vector) != query_vec.shape[0]:
            raise RetrievalError(
                f"Embedding dimension mismatch: query has {query_vec.shape[0]}, stored vector has {len(vector)}"
            )
    if not vectors:
        return np.empty(0, dtype=np.float64)

    matrix = np.asarray(vectors, dtype=np.float64)
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query_vec)
    dots = matrix @ query_vec
    scores = np.zeros_like(dots)
    np.divide(dots, norms, out=scores, where=norms > 0)
    return scores


def rank_by_similarity(
    query: Sequence[float],
    candidates: Sequence[tuple[T, Sequence[float]]],
    threshold: float,
    limit: int,
) -> list[tuple[T, float]]:
    """
    Keep candidates at or above the threshold, best first.

    The sort is stable, so candidates with equal scores keep their input
    order. Callers pass candidates oldest first to break ties by age.

    Args:
        query: Query vector
        candidates: (item, vector) pairs
        threshold: Minimum cosine similarity
        limit: Maximum results

    Returns:
        list of (item, similarity) pairs
    """
    if not candidates or limit <= 0:
        return []
    scores = cosine_similarities(query, [vector for _, vector in candidates])
    order = np.argsort(-scores, kind="stable")
    ranked = [(candidates[i][0], float(scores[i])) for i in order if scores[i] >= threshold]
    return ranked[:limit]
