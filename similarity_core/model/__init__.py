from .scored_result import ScoredResult

__all__ = ["ScoredResult"]
