"""
Similarity Engine: in-memory vector collections with exact cosine similarity search.
"""

from similarity_core.interfaces import (
    SimilarityEngineError,
    InvalidVectorError,
    InvalidQueryError,
    CollectionNotFoundError,
    VectorDimensionError,
    MismatchPolicy,
    TieBreak,
)
from similarity_core.similarity import (
    VectorPair,
    cosine_similarity,
    cosine_similarities,
    similarity,
)
from similarity_core.model import ScoredResult
from similarity_core.collection import Collection
from similarity_core.registry import CollectionRegistry
from similarity_core.identifiers import generate_identifier
from similarity_core.config import SearchConfig, get_config, init_config

__version__ = "0.1.0"

__all__ = [
    "SimilarityEngineError",
    "InvalidVectorError",
    "InvalidQueryError",
    "CollectionNotFoundError",
    "VectorDimensionError",
    "MismatchPolicy",
    "TieBreak",
    "VectorPair",
    "cosine_similarity",
    "cosine_similarities",
    "similarity",
    "ScoredResult",
    "Collection",
    "CollectionRegistry",
    "generate_identifier",
    "SearchConfig",
    "get_config",
    "init_config",
]
