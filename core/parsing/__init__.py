# Path: core/parsing/__init__.py
# Purpose: Package initializer for natural-language query interpretation.
# Layer: core/parsing.
# Details: Re-exports the parser facade and its building blocks.

from .entity_extractor import EntityExtractor
from .intent_classifier import IntentClassifier
from .parameter_resolver import ParameterResolver, Resolution
from .query_parser import AgentSearchParameters, PhotoDiscoveryQueryParser
from .temporal import resolve_range, resolve_relative_period
from .validation import QueryValidator

__all__ = [
    "AgentSearchParameters",
    "EntityExtractor",
    "IntentClassifier",
    "ParameterResolver",
    "PhotoDiscoveryQueryParser",
    "QueryValidator",
    "Resolution",
    "resolve_range",
    "resolve_relative_period",
]
