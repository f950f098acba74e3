from .collection_registry import CollectionRegistry

__all__ = ["CollectionRegistry"]
