# ABOUTME: Model-level tests for graph records and the cross-domain index types
# ABOUTME: Ensures clamping, camelCase serialization, count syncing and record invariants

import pytest
from pydantic import ValidationError

from graphweave.core.models import (
    Claim,
    EffectType,
    Entity,
    EntityType,
    GlobalEntity,
    KnowledgeGraph,
    MetricProperties,
    NetworkEffect,
    Relationship,
    RelationshipType,
)


def make_entity(name: str = "Acme Inc", **kwargs) -> Entity:
    defaults = {"type": EntityType.ORGANIZATION, "confidence": 0.7, "source_url": "https://a.com"}
    return Entity(name=name, **{**defaults, **kwargs})


class TestEntity:
    """Test entity construction rules."""

    def test_ids_are_generated(self):
        first, second = make_entity(), make_entity()

        assert first.id.startswith("entity_")
        assert first.id != second.id

    @pytest.mark.parametrize(("given", "expected"), [(1.7, 1.0), (-0.3, 0.0), (0.42, 0.42)])
    def test_confidence_is_clamped(self, given, expected):
        assert make_entity(confidence=given).confidence == expected

    def test_only_metrics_carry_properties(self):
        metric = make_entity(
            "30% increase", type=EntityType.METRIC, properties=MetricProperties(value="30", unit="%")
        )

        assert metric.properties.kind == "metric"
        assert metric.properties.schema_version == 1
        with pytest.raises(ValidationError):
            make_entity(properties=MetricProperties(value="30", unit="%"))

    def test_serializes_with_camel_case_aliases(self):
        data = make_entity(source_context="snippet").model_dump(by_alias=True)

        assert data["sourceUrl"] == "https://a.com"
        assert data["sourceContext"] == "snippet"
        assert "extractedAt" in data

    def test_accepts_camel_case_input(self):
        entity = Entity.model_validate(
            {"type": "Person", "name": "Jane Smith", "confidence": 0.6, "sourceUrl": "https://a.com"}
        )

        assert entity.type is EntityType.PERSON
        assert entity.source_url == "https://a.com"


class TestRelationship:
    """Test relationship invariants."""

    def test_self_loops_are_rejected(self):
        with pytest.raises(ValidationError):
            Relationship(type=RelationshipType.RELATED_TO, source="entity_1", target="entity_1", confidence=0.5)

    def test_confidence_is_clamped(self):
        relationship = Relationship(type=RelationshipType.OWNS, source="a", target="b", confidence=3)

        assert relationship.confidence == 1.0


class TestKnowledgeGraph:
    """Test graph count invariants."""

    def test_counts_follow_collections(self):
        entity = make_entity()
        other = make_entity("Globex Corp")
        graph = KnowledgeGraph(
            domain="a.com",
            entities=[entity, other],
            relationships=[
                Relationship(type=RelationshipType.OWNS, source=entity.id, target=other.id, confidence=0.75)
            ],
            claims=[Claim(statement="Acme Inc owns Globex Corp", entities=[entity.id], confidence=0.5)],
        )

        assert graph.metadata.entity_count == 2
        assert graph.metadata.relationship_count == 1
        assert graph.metadata.claim_count == 1

    def test_stale_counts_are_corrected_on_load(self):
        graph = KnowledgeGraph.model_validate(
            {"domain": "a.com", "metadata": {"entityCount": 12, "relationshipCount": 4, "claimCount": 9}}
        )

        assert graph.metadata.entity_count == 0
        assert graph.metadata.relationship_count == 0
        assert graph.metadata.claim_count == 0

    def test_refresh_counts_after_mutation(self):
        graph = KnowledgeGraph(domain="a.com")
        graph.entities.append(make_entity())

        graph.refresh_counts()

        assert graph.metadata.entity_count == 1

    def test_json_round_trip(self):
        graph = KnowledgeGraph(domain="a.com", entities=[make_entity()])

        restored = KnowledgeGraph.model_validate_json(graph.model_dump_json(by_alias=True))

        assert restored == graph

    def test_entity_by_id(self):
        entity = make_entity()
        graph = KnowledgeGraph(domain="a.com", entities=[entity])

        assert graph.entity_by_id(entity.id) is graph.entities[0]
        assert graph.entity_by_id("missing") is None


class TestNetworkRecords:
    """Test global index records."""

    def test_global_entity_cross_domain_flag(self):
        global_entity = GlobalEntity(
            canonical_name="OpenAI",
            entity_type=EntityType.ORGANIZATION,
            referenced_by_domains=["a.com"],
            confidence_score=0.7,
            authority_score=35,
        )

        assert not global_entity.is_cross_domain
        global_entity.referenced_by_domains.append("b.com")
        assert global_entity.is_cross_domain

    def test_network_effect_is_immutable(self):
        effect = NetworkEffect(
            effect_type=EffectType.ENTITY_AMPLIFICATION,
            affected_entities=["entity_1"],
            affected_domains=["a.com", "b.com"],
            confidence_boost=0.2,
            authority_boost=30,
            citation_probability_lift=25,
            evidence_count=2,
            contributing_domains=["a.com", "b.com"],
        )

        assert effect.effect_id.startswith("effect_")
        with pytest.raises(ValidationError):
            effect.confidence_boost = 0.5

    def test_network_effect_boosts_are_bounded(self):
        with pytest.raises(ValidationError):
            NetworkEffect(
                effect_type=EffectType.AUTHORITY_BOOST,
                affected_entities=[],
                affected_domains=[],
                confidence_boost=1.5,
                authority_boost=30,
                citation_probability_lift=25,
                evidence_count=1,
                contributing_domains=[],
            )
