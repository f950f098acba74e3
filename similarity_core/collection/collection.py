"""
In-memory vector collection with exact cosine similarity search.

This module provides the Collection class: a mapping from caller-assigned
identifiers to NumPy vectors, guarded by a readers-writer lock, with brute-force
top-k search. Search scores every stored vector of the query's length and ranks
the results; vectors of other lengths are excluded (or rejected, depending on the
mismatch policy).
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Hashable, List, Optional, Sequence
import numpy as np

from similarity_core.config.config_manager import SearchConfig
from similarity_core.interfaces import (
    VectorCollectionInterface,
    VectorLike,
    MismatchPolicy,
    TieBreak,
    InvalidQueryError,
    VectorDimensionError,
)
from similarity_core.model.scored_result import ScoredResult
from similarity_core.similarity.cosine import (
    VectorPair,
    as_vector,
    cosine_similarity,
    cosine_similarities,
)
from .rw_lock import ReadWriteLock


class Collection(VectorCollectionInterface):
    """
    In-memory store of identifier -> vector entries.

    Vectors in one collection may have different lengths unless the settings
    fix a dimension. Stored arrays are private read-only copies; reads return
    fresh copies.
    """

    def __init__(self, settings: Optional[SearchConfig] = None):
        """
        Initialize an empty collection.

        Args:
            settings: Search settings (defaults apply when omitted)
        """
        self.settings = settings or SearchConfig()
        self.logger = logging.getLogger(__name__)

        self._dtype = np.dtype(self.settings.dtype)
        self._lock = ReadWriteLock()
        self._documents: Dict[Hashable, np.ndarray] = {}

    def upsert(self, vector_id: Hashable, vector: VectorLike) -> None:
        """
        Insert a vector, replacing any existing entry for the same identifier.

        Args:
            vector_id: Caller-assigned identifier
            vector: One-dimensional numeric vector

        Raises:
            InvalidVectorError: If the vector is not one-dimensional
            VectorDimensionError: If a fixed dimension is configured and differs
        """
        array = np.array(as_vector(vector, self._dtype), copy=True)

        fixed_dimension = self.settings.fixed_dimension
        if fixed_dimension is not None and array.shape[0] != fixed_dimension:
            raise VectorDimensionError(fixed_dimension, array.shape[0])

        array.setflags(write=False)

        with self._lock.write_lock():
            replaced = vector_id in self._documents
            self._documents[vector_id] = array

        self.logger.debug(
            f"{'Replaced' if replaced else 'Inserted'} vector {vector_id} "
            f"(dimension {array.shape[0]})"
        )

    def read(self, vector_id: Hashable) -> Optional[np.ndarray]:
        """
        Get the vector stored under an identifier.

        Args:
            vector_id: Identifier to look up

        Returns:
            Copy of the stored vector, or None if not present
        """
        with self._lock.read_lock():
            stored = self._documents.get(vector_id)

        if stored is None:
            return None
        return stored.copy()

    def delete(self, vector_id: Hashable) -> None:
        """
        Remove the entry for an identifier. Absent identifiers are ignored.

        Args:
            vector_id: Identifier to remove
        """
        with self._lock.write_lock():
            removed = self._documents.pop(vector_id, None)

        if removed is not None:
            self.logger.debug(f"Deleted vector {vector_id}")

    def count(self) -> int:
        with self._lock.read_lock():
            return len(self._documents)

    def ids(self) -> List[Hashable]:
        """Return the stored identifiers (in no particular order)."""
        with self._lock.read_lock():
            return list(self._documents)

    def __contains__(self, vector_id: Hashable) -> bool:
        with self._lock.read_lock():
            return vector_id in self._documents

    def search(self, query: VectorLike, k: int) -> List[ScoredResult]:
        """
        Find the k stored vectors most similar to the query.

        Args:
            query: Query vector
            k: Maximum number of results (0 returns an empty list)

        Returns:
            Results ordered by descending cosine similarity, at most k of them

        Raises:
            InvalidQueryError: If k is not a non-negative integer
            InvalidVectorError: If the query is not one-dimensional
            VectorDimensionError: Under the "error" mismatch policy, if any
                stored vector's length differs from the query's
        """
        if isinstance(k, bool) or not isinstance(k, (int, np.integer)) or k < 0:
            raise InvalidQueryError(f"k must be a non-negative integer, got {k!r}")

        query_vector = as_vector(query, self._dtype)

        if k == 0:
            return []

        # Stored arrays are never mutated in place, so references are a snapshot
        with self._lock.read_lock():
            snapshot = list(self._documents.items())

        ids, vectors = self._eligible(query_vector.shape[0], snapshot)

        if not ids:
            return []

        scores = self._compute_similarities(query_vector, vectors)
        top_indices = self._rank(ids, scores, k)

        return [ScoredResult(ids[idx], float(scores[idx])) for idx in top_indices]

    def _eligible(self, dimension: int, snapshot):
        """Split out the entries whose length matches the query."""
        ids = []
        vectors = []
        excluded = 0

        for vector_id, vector in snapshot:
            if vector.shape[0] != dimension:
                if self.settings.mismatch_policy is MismatchPolicy.ERROR:
                    raise VectorDimensionError(dimension, vector.shape[0])
                excluded += 1
                continue
            ids.append(vector_id)
            vectors.append(vector)

        if excluded:
            self.logger.debug(
                f"Excluded {excluded} vectors with dimension other than {dimension}"
            )

        return ids, vectors

    def _compute_similarities(
        self, query_vector: np.ndarray, vectors: Sequence[np.ndarray]
    ) -> np.ndarray:
        """
        Score the query against every eligible vector.

        Args:
            query_vector: Query vector
            vectors: Eligible stored vectors

        Returns:
            Array of similarity scores aligned with vectors
        """
        settings = self.settings

        if query_vector.shape[0] >= settings.intra_parallel_min_dimension:
            # Very long vectors: split each comparison's reductions instead
            with ThreadPoolExecutor(max_workers=3) as executor:
                return np.array(
                    [
                        cosine_similarity(VectorPair(query_vector, vector, self._dtype), executor)
                        for vector in vectors
                    ],
                    dtype=self._dtype,
                )

        if settings.search_workers > 1 and len(vectors) >= settings.parallel_search_threshold:
            return self._compute_partitioned(query_vector, vectors, settings.search_workers)

        return cosine_similarities(query_vector, np.vstack(vectors))

    def _compute_partitioned(
        self, query_vector: np.ndarray, vectors: Sequence[np.ndarray], workers: int
    ) -> np.ndarray:
        chunk_size = math.ceil(len(vectors) / workers)
        chunks = [vectors[i : i + chunk_size] for i in range(0, len(vectors), chunk_size)]

        self.logger.debug(f"Scoring {len(vectors)} vectors in {len(chunks)} partitions")

        with ThreadPoolExecutor(max_workers=workers) as executor:
            parts = list(
                executor.map(lambda chunk: cosine_similarities(query_vector, np.vstack(chunk)), chunks)
            )

        return np.concatenate(parts)

    def _rank(self, ids: List[Hashable], scores: np.ndarray, k: int) -> np.ndarray:
        """
        Order result indices by descending score and keep the first k.

        NaN scores sort after every real score.
        """
        negated = -scores

        if self.settings.tie_break is TieBreak.IDENTIFIER:
            # lexsort sorts by the last key first
            keys = np.array([str(vector_id) for vector_id in ids])
            return np.lexsort((keys, negated))[:k]

        if len(scores) <= k:
            return np.argsort(negated, kind="stable")

        top_indices = np.argpartition(negated, k)[:k]
        return top_indices[np.argsort(negated[top_indices], kind="stable")]
