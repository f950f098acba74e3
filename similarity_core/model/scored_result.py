"""
Scored result module for search output.

This module defines the (identifier, score) pair returned by collection searches.
"""

from dataclasses import dataclass
from typing import Any, Dict, Hashable, Iterator


@dataclass(frozen=True)
class ScoredResult:
    """
    A single search hit.

    Attributes:
        id: Identifier of the matching vector
        score: Cosine similarity between the query and the stored vector
    """

    id: Hashable
    score: float

    def __iter__(self) -> Iterator[Any]:
        # Unpacks as (id, score)
        yield self.id
        yield self.score

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the result to a dictionary representation.

        Returns:
            Dictionary with the identifier rendered as a string and the score
        """
        return {"id": str(self.id), "score": self.score}
