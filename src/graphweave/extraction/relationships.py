# ABOUTME: Keyword-driven relationship inference between entities that share a sentence
# ABOUTME: Classifies each entity pair in both orientations and scores it from sentence wording

import re
from datetime import datetime

from graphweave.config import get_config
from graphweave.core.models import Entity, EntityType, Relationship, RelationshipType, utcnow
from graphweave.extraction.base import RelationshipClassifier
from graphweave.extraction.text import split_sentences
from graphweave.utils.logging import get_logger


def _keywords(*words: str) -> re.Pattern[str]:
    return re.compile(r"\b(?:" + "|".join(words) + r")\b", re.IGNORECASE)


# (source type, target type) -> ordered (pattern, relationship) rules
TYPED_RULES: dict[tuple[EntityType, EntityType], list[tuple[re.Pattern[str], RelationshipType]]] = {
    (EntityType.PERSON, EntityType.ORGANIZATION): [
        (
            _keywords("CEO", "founder", "co-founder", "president", "director", "chairman", "executive"),
            RelationshipType.WORKS_FOR,
        ),
        (
            _keywords("works at", "works for", "employed by", "employee of", "joined", "hired by"),
            RelationshipType.WORKS_FOR,
        ),
        (_keywords("owns", "founded", "established", "started"), RelationshipType.OWNS),
    ],
    (EntityType.ORGANIZATION, EntityType.ORGANIZATION): [
        (_keywords("acquired", "bought", "purchased", "merger", "acquisition"), RelationshipType.OWNS),
        (_keywords("partnership", "partners with", "collaboration", "works with"), RelationshipType.RELATED_TO),
    ],
    (EntityType.ORGANIZATION, EntityType.PRODUCT): [
        (
            _keywords("creates", "develops", "builds", "launches", "releases", "produces", "manufactures"),
            RelationshipType.CREATES,
        ),
        (_keywords("owns", "proprietary", "trademark"), RelationshipType.OWNS),
    ],
}

METRIC_RULE = _keywords("shows", "demonstrates", "proves", "indicates", "measures")

CONCEPT_RULES = [
    (_keywords("contradicts", "opposes", "conflicts with", "challenges"), RelationshipType.CONTRADICTS),
    (_keywords("supports", "validates", "confirms", "proves"), RelationshipType.SUPPORTS),
    (_keywords("cites", "references", "mentions", "quotes"), RelationshipType.CITES),
]

CONNECTIVE = _keywords("and", "with", "related")
CORROBORATION = _keywords("according to", "confirmed", "verified", "official")

BASE_CONFIDENCE = 0.5
TYPE_CONFIDENCE = {
    RelationshipType.WORKS_FOR: 0.75,
    RelationshipType.OWNS: 0.75,
    RelationshipType.CREATES: 0.75,
    RelationshipType.MEASURES: 0.8,
    RelationshipType.PROVES: 0.8,
}
CORROBORATION_BONUS = 0.15
CORROBORATED_CEILING = 0.95


class KeywordRelationshipClassifier:
    """Rule table keyed on the (source, target) entity types, with a generic fallback."""

    def classify(self, source: Entity, target: Entity, sentence: str) -> RelationshipType | None:
        for pattern, relationship_type in TYPED_RULES.get((source.type, target.type), []):
            if pattern.search(sentence):
                return relationship_type

        if EntityType.METRIC in (source.type, target.type) and METRIC_RULE.search(sentence):
            return RelationshipType.MEASURES

        if source.type is EntityType.CONCEPT and target.type is EntityType.CONCEPT:
            for pattern, relationship_type in CONCEPT_RULES:
                if pattern.search(sentence):
                    return relationship_type
            return RelationshipType.RELATED_TO

        # Only link otherwise unrelated entities when the sentence joins them
        if CONNECTIVE.search(sentence):
            return RelationshipType.RELATED_TO
        return None

    def confidence(self, relationship_type: RelationshipType, sentence: str) -> float:
        confidence = TYPE_CONFIDENCE.get(relationship_type, BASE_CONFIDENCE)
        if CORROBORATION.search(sentence):
            confidence = min(CORROBORATED_CEILING, confidence + CORROBORATION_BONUS)
        return confidence


class RelationshipInferencer:
    """Emits typed relationships between entities mentioned in the same sentence."""

    def __init__(
        self,
        classifier: RelationshipClassifier | None = None,
        max_pairs_per_sentence: int | None = None,
        min_sentence_length: int | None = None,
        snippet_length: int | None = None,
    ):
        config = get_config()
        self.classifier = classifier or KeywordRelationshipClassifier()
        self.max_pairs_per_sentence = (
            config.max_pairs_per_sentence if max_pairs_per_sentence is None else max_pairs_per_sentence
        )
        self.min_sentence_length = config.min_sentence_length if min_sentence_length is None else min_sentence_length
        self.snippet_length = config.snippet_length if snippet_length is None else snippet_length
        self.logger = get_logger(__name__)

    def sentence_index(self, text: str, entities: list[Entity]) -> list[tuple[str, list[Entity]]]:
        """Group entities by the sentences whose text contains their name.

        Args:
            text: Normalized plain text
            entities: Entities extracted from the same text

        Returns:
            (sentence, entities) pairs for sentences holding at least two entities
        """
        index = []
        for sentence in split_sentences(text, self.min_sentence_length):
            present = [entity for entity in entities if entity.name in sentence]
            if len(present) >= 2:
                index.append((sentence, present))
        return index

    def _orient(self, a: Entity, b: Entity, sentence: str) -> tuple[Entity, Entity, RelationshipType] | None:
        forward = self.classifier.classify(a, b, sentence)
        if forward is not None and forward is not RelationshipType.RELATED_TO:
            return a, b, forward

        backward = self.classifier.classify(b, a, sentence)
        if backward is not None and backward is not RelationshipType.RELATED_TO:
            return b, a, backward

        if forward is not None:
            return a, b, forward
        if backward is not None:
            return b, a, backward
        return None

    def infer(self, text: str, entities: list[Entity], extracted_at: datetime | None = None) -> list[Relationship]:
        """Infer relationships for every entity pair sharing a sentence.

        A specific relationship in either orientation beats the generic
        ``relatedTo`` fallback. At most ``max_pairs_per_sentence``
        relationships are emitted per sentence.

        Args:
            text: Normalized plain text
            entities: Entities extracted from the same text
            extracted_at: Timestamp stamped on every relationship (defaults to now)

        Returns:
            Relationships in sentence order
        """
        extracted_at = extracted_at or utcnow()
        relationships: list[Relationship] = []

        for sentence, present in self.sentence_index(text, entities):
            cap = min(self.max_pairs_per_sentence, len(present) * (len(present) - 1) // 2)
            emitted = 0
            for i, a in enumerate(present):
                if emitted >= cap:
                    break
                for b in present[i + 1 :]:
                    if emitted >= cap:
                        break
                    if a.name.lower() == b.name.lower():
                        continue

                    oriented = self._orient(a, b, sentence)
                    if oriented is None:
                        continue

                    source, target, relationship_type = oriented
                    relationships.append(
                        Relationship(
                            type=relationship_type,
                            source=source.id,
                            target=target.id,
                            confidence=self.classifier.confidence(relationship_type, sentence),
                            context=sentence[: self.snippet_length],
                            extracted_at=extracted_at,
                        )
                    )
                    emitted += 1

        self.logger.debug("Inferred relationships", relationship_count=len(relationships))
        return relationships
