"""
In-memory vector collections.

Usage:
    collection = Collection()
    collection.upsert(generate_identifier(), [12.0, 72.0, 63.0])

    results = collection.search([41.0, 51.0, 31.0], k=3)
    for result in results:
        print(result.id, result.score)
"""

from .collection import Collection
from .rw_lock import ReadWriteLock

__all__ = ["Collection", "ReadWriteLock"]
