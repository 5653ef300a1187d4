# ABOUTME: Tests for the JSON-LD projection of knowledge graphs
# ABOUTME: Verifies the graph envelope and the entity, relationship and claim node mappings

import json
from datetime import UTC, datetime

from graphweave.core.export import claim_node, entity_node, relationship_node, to_json_ld
from graphweave.core.models import (
    Claim,
    Entity,
    EntityType,
    Evidence,
    EvidenceType,
    GraphMetadata,
    KnowledgeGraph,
    Relationship,
    RelationshipType,
)


def sample_graph() -> KnowledgeGraph:
    jane = Entity(type=EntityType.PERSON, name="Jane Smith", confidence=0.6, source_url="https://acme.example/news")
    acme = Entity(
        type=EntityType.ORGANIZATION,
        name="Acme Inc",
        url="https://acme.example",
        confidence=0.7,
        source_url="https://acme.example/news",
    )
    return KnowledgeGraph(
        domain="acme.example",
        entities=[jane, acme],
        relationships=[Relationship(type=RelationshipType.WORKS_FOR, source=jane.id, target=acme.id, confidence=0.9)],
        claims=[
            Claim(
                statement="Jane Smith grew Acme Inc revenue 30%",
                entities=[jane.id, acme.id],
                evidence=[Evidence(type=EvidenceType.DATA, source="Q3 report")],
                confidence=0.8,
            )
        ],
        metadata=GraphMetadata(
            created_at=datetime(2024, 1, 1, tzinfo=UTC),
            updated_at=datetime(2024, 2, 1, tzinfo=UTC),
            source_urls=["https://acme.example/news"],
        ),
    )


class TestToJsonLd:
    """Test the graph-level document."""

    def test_envelope(self):
        graph = sample_graph()

        document = to_json_ld(graph)

        assert document["@context"] == "https://schema.org"
        assert document["@type"] == "KnowledgeGraph"
        assert document["@id"] == graph.id
        assert document["name"] == "Knowledge Graph for acme.example"
        assert document["publisher"] == {"@type": "Organization", "name": "acme.example"}
        assert document["dateCreated"] == "2024-01-01T00:00:00+00:00"
        assert document["dateModified"] == "2024-02-01T00:00:00+00:00"
        assert document["version"] == "1.0.0"
        assert document["isBasedOn"] == ["https://acme.example/news"]

    def test_collections_are_projected(self):
        document = to_json_ld(sample_graph())

        assert [node["@type"] for node in document["entities"]] == ["Person", "Organization"]
        assert len(document["relationships"]) == 1
        assert len(document["claims"]) == 1

    def test_document_is_json_serializable(self):
        text = json.dumps(to_json_ld(sample_graph()))

        assert "Knowledge Graph for acme.example" in text

    def test_empty_graph(self):
        document = to_json_ld(KnowledgeGraph(domain="empty.example"))

        assert document["entities"] == []
        assert document["relationships"] == []
        assert document["claims"] == []


class TestNodes:
    """Test per-record node mapping."""

    def test_entity_node_drops_missing_fields(self):
        jane, acme = sample_graph().entities

        assert "url" not in entity_node(jane)
        assert "description" not in entity_node(jane)
        assert entity_node(acme)["url"] == "https://acme.example"
        assert entity_node(acme)["sourceUrl"] == "https://acme.example/news"

    def test_relationship_node(self):
        graph = sample_graph()

        node = relationship_node(graph.relationships[0])

        assert node["@type"] == "Relationship"
        assert node["relationshipType"] == "worksFor"
        assert node["source"] == graph.entities[0].id
        assert node["target"] == graph.entities[1].id

    def test_claim_node(self):
        graph = sample_graph()

        node = claim_node(graph.claims[0])

        assert node["@type"] == "Claim"
        assert node["about"] == [entity.id for entity in graph.entities]
        assert node["evidence"] == [{"type": "data", "source": "Q3 report"}]
        assert node["confidence"] == 0.8
