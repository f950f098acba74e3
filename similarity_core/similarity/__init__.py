"""
Similarity functions.
"""

from .cosine import (
    VectorPair,
    as_vector,
    cosine_similarity,
    cosine_similarities,
    similarity,
)

__all__ = [
    "VectorPair",
    "as_vector",
    "cosine_similarity",
    "cosine_similarities",
    "similarity",
]
