# ABOUTME: Protocol interfaces for swappable entity matchers and relationship classifiers
# ABOUTME: Rule-based implementations live beside them; a statistical model can replace either

from typing import Protocol

from graphweave.core.models import Entity, EntityType, MetricProperties, RelationshipType


class EntityMatcher(Protocol):
    """Finds entities of a single type inside one sentence."""

    entity_type: EntityType
    confidence: float

    def find(self, sentence: str) -> list[tuple[str, MetricProperties | None]]:
        """Return ``(name, properties)`` for every accepted match, in text order.

        Args:
            sentence: One normalized sentence

        Returns:
            Matched names with an optional typed payload
        """
        ...


class RelationshipClassifier(Protocol):
    """Decides which relationship, if any, links two entities in a sentence."""

    def classify(self, source: Entity, target: Entity, sentence: str) -> RelationshipType | None:
        """Classify the directed pair ``source -> target``.

        Returns:
            The relationship type, or None when the sentence gives no evidence
        """
        ...

    def confidence(self, relationship_type: RelationshipType, sentence: str) -> float:
        """Score a classified relationship given its sentence."""
        ...
