"""
Interfaces and exceptions for the similarity engine.
"""

from .collection_interface import (
    VectorCollectionInterface,
    VectorLike,
    MismatchPolicy,
    TieBreak,
    SimilarityEngineError,
    InvalidVectorError,
    InvalidQueryError,
    CollectionNotFoundError,
    VectorDimensionError,
)

__all__ = [
    "VectorCollectionInterface",
    "VectorLike",
    "MismatchPolicy",
    "TieBreak",
    "SimilarityEngineError",
    "InvalidVectorError",
    "InvalidQueryError",
    "CollectionNotFoundError",
    "VectorDimensionError",
]
