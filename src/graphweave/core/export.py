# ABOUTME: Schema.org flavoured JSON-LD projection of a knowledge graph
# ABOUTME: Maps entities to typed nodes, relationships to edge records and claims to claim nodes

from typing import Any

from graphweave.core.models import Claim, Entity, KnowledgeGraph, Relationship

SCHEMA_CONTEXT = "https://schema.org"


def _without_none(node: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in node.items() if value is not None}


def entity_node(entity: Entity) -> dict[str, Any]:
    return _without_none(
        {
            "@type": entity.type.value,
            "@id": entity.id,
            "name": entity.name,
            "url": entity.url,
            "description": entity.description,
            "sourceUrl": entity.source_url,
            "confidence": entity.confidence,
        }
    )


def relationship_node(relationship: Relationship) -> dict[str, Any]:
    return {
        "@type": "Relationship",
        "@id": relationship.id,
        "relationshipType": relationship.type.value,
        "source": relationship.source,
        "target": relationship.target,
        "confidence": relationship.confidence,
    }


def claim_node(claim: Claim) -> dict[str, Any]:
    return {
        "@type": "Claim",
        "@id": claim.id,
        "statement": claim.statement,
        "about": list(claim.entities),
        "evidence": [evidence.model_dump(mode="json", by_alias=True, exclude_none=True) for evidence in claim.evidence],
        "confidence": claim.confidence,
    }


def to_json_ld(graph: KnowledgeGraph) -> dict[str, Any]:
    """Project a graph onto a JSON-LD document for downstream publishing.

    Args:
        graph: Graph to export

    Returns:
        JSON-serializable dict rooted at a ``KnowledgeGraph`` node
    """
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "KnowledgeGraph",
        "@id": graph.id,
        "name": f"Knowledge Graph for {graph.domain}",
        "description": f"Extracted knowledge from {graph.domain}",
        "publisher": {"@type": "Organization", "name": graph.domain},
        "dateCreated": graph.metadata.created_at.isoformat(),
        "dateModified": graph.metadata.updated_at.isoformat(),
        "version": graph.metadata.version,
        "isBasedOn": list(graph.metadata.source_urls),
        "entities": [entity_node(entity) for entity in graph.entities],
        "relationships": [relationship_node(relationship) for relationship in graph.relationships],
        "claims": [claim_node(claim) for claim in graph.claims],
    }
