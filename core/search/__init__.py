# Path: core/search/__init__.py
# Purpose: Package initializer for search execution and pipeline orchestration.
# Layer: core/search.
# Details: Exposes the search engine, ranking helpers, and the discovery pipeline entrypoint.

from .engine import SemanticSearchEngine
from .pipeline import DiscoveryResult, SearchPipeline
from .ranking import intersect, paginate, rank, relevance_score

__all__ = [
    "DiscoveryResult",
    "SearchPipeline",
    "SemanticSearchEngine",
    "intersect",
    "paginate",
    "rank",
    "relevance_score",
]
