# Path: core/parsing/entity_extractor.py
# Purpose: Tokenize free-text queries and extract typed entity spans.
# Layer: core/parsing.
# Details: Regex families from the priority table, quoted-phrase protection, and overlap resolution.

from __future__ import annotations

import logging
import re
from typing import List, Sequence

from core.models.query import EntityExtraction, Span, TokenizeResult
from .patterns import ENTITY_PATTERNS, KEYWORD_PHRASE_GROUP, QUOTED_PHRASE_PATTERNS, EntityPatternGroup

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\x00(\d+)\x00")


class EntityExtractor:
    """Pull typed spans (time periods, locations, objects, scenes, people, quoted phrases) out of a query."""

    def __init__(
        self,
        pattern_groups: Sequence[EntityPatternGroup] = ENTITY_PATTERNS,
        keyword_group: EntityPatternGroup = KEYWORD_PHRASE_GROUP,
    ) -> None:
        self.pattern_groups = tuple(pattern_groups)
        self.keyword_group = keyword_group

    def tokenize(self, query: str) -> TokenizeResult:
        """
        Split a query into lower-cased tokens and resolve non-overlapping entities.

        Spans always refer to offsets in the original ``query``. Quoted phrases survive
        as single tokens and win over any entity they fully contain.
        """

        logger.debug("Tokenizing query: %r", query)
        tokens = self._split_tokens(query)

        candidates = self._scan(query, self.pattern_groups)
        entities = self._resolve_overlaps(candidates)
        keyword_entities = self._scan(query, (self.keyword_group,))
        entities = self._merge_keyword_phrases(entities, keyword_entities)
        entities.sort(key=lambda entity: (entity.span.start, -len(entity.span)))

        logger.debug("Extracted entities: %s", [entity.to_dict() for entity in entities])
        return TokenizeResult(tokens=tokens, entities=entities, original_query=query)

    @staticmethod
    def _split_tokens(query: str) -> List[str]:
        """Lower-case, strip punctuation, and split on whitespace, keeping quoted phrases whole."""

        quoted: List[str] = []

        def _protect(match: re.Match) -> str:
            quoted.append(match.group(1))
            return f" \x00{len(quoted) - 1}\x00 "

        # NUL only ever marks a protected phrase.
        processed = query.replace("\x00", " ")
        for pattern in QUOTED_PHRASE_PATTERNS:
            processed = pattern.sub(_protect, processed)

        tokens: List[str] = []
        for chunk in processed.split():
            placeholder = _PLACEHOLDER.fullmatch(chunk)
            if placeholder:
                tokens.append(quoted[int(placeholder.group(1))])
            else:
                tokens.extend(re.sub(r"[^\w\s]", " ", chunk.lower()).split())
        return tokens

    @staticmethod
    def _scan(query: str, groups: Sequence[EntityPatternGroup]) -> List[EntityExtraction]:
        """Run every pattern of the given families against the original query."""

        found: List[EntityExtraction] = []
        for group in groups:
            for spec in group.patterns:
                for match in spec.regex.finditer(query):
                    value = match.group(spec.value_group) or match.group(0)
                    found.append(
                        EntityExtraction(
                            type=group.type,
                            value=value.strip(),
                            confidence=group.confidence,
                            span=Span(match.start(), match.end()),
                        )
                    )
        return found

    @staticmethod
    def _resolve_overlaps(candidates: List[EntityExtraction]) -> List[EntityExtraction]:
        """Keep candidates whose span is not fully contained in an already accepted span."""

        # sorted() is stable, so equal spans keep family order.
        ordered = sorted(candidates, key=lambda entity: (entity.span.start, -len(entity.span)))
        accepted: List[EntityExtraction] = []
        for candidate in ordered:
            if any(kept.span.contains(candidate.span) for kept in accepted):
                logger.debug("Skipping %s %r: contained in an accepted span", candidate.type, candidate.value)
                continue
            accepted.append(candidate)
        return accepted

    @staticmethod
    def _merge_keyword_phrases(
        entities: List[EntityExtraction], keyword_entities: List[EntityExtraction]
    ) -> List[EntityExtraction]:
        """Give quoted phrases priority: evict every entity that lies entirely inside a phrase."""

        merged = list(entities)
        accepted_phrases: List[EntityExtraction] = []
        for phrase in sorted(keyword_entities, key=lambda entity: (entity.span.start, -len(entity.span))):
            if any(kept.span.contains(phrase.span) for kept in accepted_phrases):
                continue
            evicted = [entity for entity in merged if phrase.span.contains(entity.span)]
            for entity in evicted:
                logger.debug("Quoted phrase %r overrides %s %r", phrase.value, entity.type, entity.value)
                merged.remove(entity)
            merged.append(phrase)
            accepted_phrases.append(phrase)
        return merged

