"""
Cosine similarity between numeric vectors.

This module provides the pairwise similarity function used by collections, plus a
batch form that scores one query against a matrix of stored vectors at once.
Zero-magnitude vectors score 0 in both forms, and results are never clamped.
Each vector is divided by its largest absolute component before the reductions,
so very large or very small finite components do not overflow to inf or vanish.
"""

from concurrent.futures import Executor
from typing import Optional, Tuple
import numpy as np

from similarity_core.interfaces import (
    VectorLike,
    InvalidVectorError,
    VectorDimensionError,
)


def as_vector(values: VectorLike, dtype=np.float64) -> np.ndarray:
    """
    Convert a sequence of numbers into a one-dimensional array.

    Args:
        values: Sequence of numbers or numpy array
        dtype: Target floating point type

    Returns:
        One-dimensional numpy array of the requested dtype

    Raises:
        InvalidVectorError: If the input is not a one-dimensional numeric sequence
    """
    try:
        array = np.asarray(values, dtype=dtype)
    except (TypeError, ValueError) as e:
        raise InvalidVectorError(f"Not a numeric vector: {str(e)}") from e

    if array.ndim != 1:
        raise InvalidVectorError(f"Expected a one-dimensional vector, got {array.ndim} dimensions")

    return array


class VectorPair:
    """
    Two vectors of equal length.

    Building a pair is the only way to call cosine_similarity, so a length
    mismatch is reported here instead of producing a misaligned result.
    """

    __slots__ = ("first", "second")

    def __init__(self, first: VectorLike, second: VectorLike, dtype=np.float64):
        """
        Initialize the pair.

        Args:
            first: First vector
            second: Second vector
            dtype: Floating point type used for the computation

        Raises:
            InvalidVectorError: If either input is not one-dimensional
            VectorDimensionError: If the lengths differ
        """
        first = as_vector(first, dtype)
        second = as_vector(second, dtype)

        if first.shape[0] != second.shape[0]:
            raise VectorDimensionError(first.shape[0], second.shape[0])

        self.first = first
        self.second = second

    def __len__(self) -> int:
        return self.first.shape[0]

    def __repr__(self) -> str:
        return f"VectorPair(dimension={len(self)}, dtype={self.first.dtype})"


def _dot(a: np.ndarray, b: np.ndarray) -> float:
    return np.dot(a, b)


def _magnitude(a: np.ndarray) -> float:
    return np.sqrt(np.dot(a, a))


def _normalize_range(a: np.ndarray) -> np.ndarray:
    """Divide by the largest absolute component so squares neither overflow nor underflow."""
    largest = np.max(np.abs(a), initial=0.0)
    if largest == 0.0 or not np.isfinite(largest):
        return a
    return a / largest


def _reductions(pair: VectorPair, executor: Optional[Executor]) -> Tuple[float, float, float]:
    first = _normalize_range(pair.first)
    second = _normalize_range(pair.second)

    if executor is None:
        return _dot(first, second), _magnitude(first), _magnitude(second)

    dot_future = executor.submit(_dot, first, second)
    first_future = executor.submit(_magnitude, first)
    second_future = executor.submit(_magnitude, second)
    return dot_future.result(), first_future.result(), second_future.result()


def cosine_similarity(pair: VectorPair, executor: Optional[Executor] = None) -> float:
    """
    Compute the cosine similarity of a vector pair.

    The dot product and both magnitudes are independent reductions. They run
    sequentially unless an executor is given, in which case they are submitted
    as three tasks and joined before combining.

    Args:
        pair: Equal-length vectors to compare
        executor: Optional executor for the three reductions

    Returns:
        Similarity score, or 0.0 if either vector has zero magnitude
    """
    dot_product, magnitude1, magnitude2 = _reductions(pair, executor)

    if magnitude1 == 0.0 or magnitude2 == 0.0:
        return 0.0

    return float(dot_product / (magnitude1 * magnitude2))


def similarity(first: VectorLike, second: VectorLike, dtype=np.float64) -> float:
    """Cosine similarity of two equal-length vectors."""
    return cosine_similarity(VectorPair(first, second, dtype))


def cosine_similarities(query: np.ndarray, vectors: np.ndarray) -> np.ndarray:
    """
    Score a query against every row of a matrix.

    Args:
        query: One-dimensional query vector
        vectors: Matrix whose rows have the query's length

    Returns:
        Array of similarity scores, one per row

    Raises:
        VectorDimensionError: If the row length differs from the query length
    """
    if vectors.ndim != 2:
        raise InvalidVectorError(f"Expected a matrix of vectors, got {vectors.ndim} dimensions")

    if vectors.shape[1] != query.shape[0]:
        raise VectorDimensionError(query.shape[0], vectors.shape[1])

    query = _normalize_range(query)
    largest = np.max(np.abs(vectors), axis=1, initial=0.0)
    row_scale = np.where((largest == 0.0) | ~np.isfinite(largest), 1.0, largest)
    vectors = vectors / row_scale[:, np.newaxis]

    query_norm = np.sqrt(np.dot(query, query))
    vectors_norm = np.sqrt(np.einsum("ij,ij->i", vectors, vectors))
    dot_products = vectors @ query

    denominators = vectors_norm * query_norm
    scores = np.zeros(vectors.shape[0], dtype=np.result_type(query, vectors))

    # Zero-magnitude rows (or a zero query) keep a score of 0
    nonzero = (vectors_norm != 0.0) & (query_norm != 0.0)
    np.divide(dot_products, denominators, out=scores, where=nonzero)

    return scores
