# Path: core/parsing/intent_classifier.py
# Purpose: Classify the purpose of a free-text photo query.
# Layer: core/parsing.
# Details: Scores intent families by match count and picks the highest confidence, earliest family on ties.

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from core.models.query import SearchQueryIntent
from .patterns import (
    DEFAULT_INTENT,
    DEFAULT_INTENT_CONFIDENCE,
    INTENT_MATCH_WEIGHT,
    INTENT_PATTERNS,
    IntentPatternGroup,
)

logger = logging.getLogger(__name__)


class IntentClassifier:
    """Pick one of discovery, filter, bulk_operation, or refinement for a query."""

    def __init__(
        self,
        pattern_groups: Sequence[IntentPatternGroup] = INTENT_PATTERNS,
        low_confidence_threshold: float = 0.5,
    ) -> None:
        self.pattern_groups = tuple(pattern_groups)
        self.low_confidence_threshold = low_confidence_threshold

    def score(self, query: str) -> Dict[str, float]:
        """Return the capped confidence of every family that matched at least once."""

        scores: Dict[str, float] = {}
        for group in self.pattern_groups:
            raw = sum(len(list(regex.finditer(query))) * INTENT_MATCH_WEIGHT for regex in group.patterns)
            if raw > 0:
                scores[group.type] = min(raw * group.confidence, 1.0)
        return scores

    def extract_intent(self, query: str) -> SearchQueryIntent:
        """
        Classify ``query``.

        Families are visited in precedence order and a later family only replaces the
        current best on a strictly higher confidence, so ties go to the earlier family.
        Falls back to discovery at 0.1 when nothing matches.
        """

        scores = self.score(query)
        best = SearchQueryIntent(type=DEFAULT_INTENT, confidence=DEFAULT_INTENT_CONFIDENCE)
        for group in self.pattern_groups:
            confidence = scores.get(group.type)
            if confidence is not None and confidence > best.confidence:
                best = SearchQueryIntent(type=group.type, confidence=confidence)

        if best.confidence < self.low_confidence_threshold:
            best.alternative_actions = self._alternatives(scores, best.type)

        logger.debug("Intent for %r: %s (%.2f), scores=%s", query, best.type, best.confidence, scores)
        return best

    @staticmethod
    def _alternatives(scores: Dict[str, float], chosen: str) -> List[str]:
        ranked = sorted(scores.items(), key=lambda item: -item[1])
        return [intent for intent, _ in ranked if intent != chosen]
