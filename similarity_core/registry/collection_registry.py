"""
Registry of named collections.

The registry owns its collections exclusively and forwards searches to them.
It is constructed explicitly and passed to the code that needs it; there is no
module-level instance.
"""

import threading
from typing import Dict, List, Optional

from similarity_core.collection.collection import Collection
from similarity_core.config.config_manager import SearchConfig
from similarity_core.interfaces import (
    CollectionNotFoundError,
    SimilarityEngineError,
    VectorLike,
)
from similarity_core.model.scored_result import ScoredResult
from similarity_core.monitoring.structured_logger import get_logger, OperationLogger


class CollectionRegistry:
    """Name -> Collection table."""

    def __init__(self, settings: Optional[SearchConfig] = None):
        """
        Initialize an empty registry.

        Args:
            settings: Search settings handed to every collection created here
        """
        self.settings = settings or SearchConfig()
        self.logger = get_logger(__name__, component="collection_registry")

        self._lock = threading.Lock()
        self._collections: Dict[str, Collection] = {}

    def add(self, name: str) -> Collection:
        """
        Create an empty collection under a name.

        An existing collection with the same name is replaced and its contents
        are discarded.

        Args:
            name: Collection name

        Returns:
            The new collection
        """
        collection = Collection(self.settings)

        with self._lock:
            replaced = name in self._collections
            self._collections[name] = collection

        if replaced:
            self.logger.warning("Replaced existing collection", collection=name)
        else:
            self.logger.info("Created collection", collection=name)

        return collection

    def get(self, name: str) -> Optional[Collection]:
        with self._lock:
            return self._collections.get(name)

    def require(self, name: str) -> Collection:
        """
        Get a collection that must exist.

        Raises:
            CollectionNotFoundError: If no collection has this name
        """
        collection = self.get(name)
        if collection is None:
            raise CollectionNotFoundError(name)
        return collection

    def drop(self, name: str) -> bool:
        """
        Remove a collection and everything stored in it.

        Returns:
            True if a collection was removed, False if none had this name
        """
        with self._lock:
            removed = self._collections.pop(name, None)

        if removed is None:
            return False

        self.logger.info("Dropped collection", collection=name, size=removed.count())
        return True

    def names(self) -> List[str]:
        with self._lock:
            return list(self._collections)

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._collections

    def __len__(self) -> int:
        with self._lock:
            return len(self._collections)

    def search(self, name: str, query: VectorLike, k: int) -> Optional[List[ScoredResult]]:
        """
        Search one collection.

        Args:
            name: Collection name
            query: Query vector
            k: Maximum number of results

        Returns:
            Ranked results, or None if the collection does not exist
        """
        collection = self.get(name)
        if collection is None:
            self.logger.debug("Search on unknown collection", collection=name)
            return None

        operation = OperationLogger(self.logger, "search")
        operation.start(collection=name, k=k)
        try:
            results = collection.search(query, k)
        except SimilarityEngineError as e:
            operation.error(e)
            raise

        operation.success(result_count=len(results))
        return results

    def __repr__(self) -> str:
        return f"CollectionRegistry(collections={self.names()})"
