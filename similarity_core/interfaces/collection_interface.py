"""
Abstract interface for vector collections.

This module defines the base interface that every collection implementation must
implement, together with the exception hierarchy shared by the similarity engine.
"""

from abc import ABC, abstractmethod
from typing import Any, Hashable, List, Optional, Sequence, Union
from enum import Enum
import numpy as np


VectorLike = Union[Sequence[float], np.ndarray]


class MismatchPolicy(Enum):
    """How a search treats stored vectors whose length differs from the query."""

    SKIP = "skip"
    ERROR = "error"


class TieBreak(Enum):
    """Ordering applied between results with equal scores."""

    IDENTIFIER = "identifier"
    NONE = "none"


class VectorCollectionInterface(ABC):
    """
    Abstract base class for vector collections.

    A collection owns a mapping from identifier to vector and answers
    k-nearest-neighbor queries against it by cosine similarity.
    """

    @abstractmethod
    def upsert(self, vector_id: Hashable, vector: VectorLike) -> None:
        """
        Insert a vector, replacing any existing entry for the same identifier.

        Args:
            vector_id: Caller-assigned identifier
            vector: One-dimensional numeric vector
        """
        pass

    @abstractmethod
    def read(self, vector_id: Hashable) -> Optional[np.ndarray]:
        """
        Get the vector stored under an identifier.

        Args:
            vector_id: Identifier to look up

        Returns:
            Copy of the stored vector, or None if not present
        """
        pass

    @abstractmethod
    def delete(self, vector_id: Hashable) -> None:
        """
        Remove the entry for an identifier. Absent identifiers are ignored.

        Args:
            vector_id: Identifier to remove
        """
        pass

    @abstractmethod
    def search(self, query: VectorLike, k: int) -> List[Any]:
        """
        Find the k stored vectors most similar to the query.

        Args:
            query: Query vector
            k: Maximum number of results

        Returns:
            Scored results ordered by descending similarity
        """
        pass

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored vectors."""
        pass

    def __len__(self) -> int:
        return self.count()

    def __str__(self) -> str:
        """String representation of the collection."""
        return f"{self.__class__.__name__}(size={self.count()})"


class SimilarityEngineError(Exception):
    """Base exception for similarity engine errors."""

    pass


class InvalidVectorError(SimilarityEngineError, ValueError):
    """Exception raised when an input cannot be used as a one-dimensional vector."""

    pass


class InvalidQueryError(SimilarityEngineError, ValueError):
    """Exception raised for malformed search parameters."""

    pass


class CollectionNotFoundError(SimilarityEngineError, KeyError):
    """Exception raised when a named collection does not exist."""

    def __init__(self, name: str):
        super().__init__(f"Collection {name} does not exist")
        self.name = name

    def __str__(self) -> str:
        return self.args[0]


class VectorDimensionError(SimilarityEngineError, ValueError):
    """Exception raised for dimension mismatches."""

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Vector dimension mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual
