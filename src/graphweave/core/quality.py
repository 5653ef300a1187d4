# ABOUTME: Graph quality score and expertise topic ranking
# ABOUTME: Scores confidence, relationship density and claim coverage on a 0-100 scale

from collections import Counter

from graphweave.core.errors import EmptyGraphError
from graphweave.core.models import EntityType, ExpertiseArea, KnowledgeGraph

CONFIDENCE_WEIGHT = 40
DENSITY_WEIGHT = 30
CLAIM_WEIGHT = 30
MAX_EXPERTISE_AREAS = 10


def calculate_graph_quality(graph: KnowledgeGraph) -> int:
    """Score a graph from 0 to 100.

    score = 40 * avg(confidence) + 30 * min(1, relationships / expected_pairs)
            + 30 * min(1, claims / entities / 2)

    where expected_pairs = n * (n - 1) / 2. A single-entity graph has no
    possible pairs and scores 0 on the density term.

    Args:
        graph: Graph to score

    Returns:
        Integer quality score in [0, 100]

    Raises:
        EmptyGraphError: If the graph has no entities
    """
    entity_count = len(graph.entities)
    if entity_count == 0:
        raise EmptyGraphError(f"Cannot score graph {graph.id} for {graph.domain}: it has no entities")

    avg_confidence = sum(entity.confidence for entity in graph.entities) / entity_count

    expected_pairs = entity_count * (entity_count - 1) / 2
    density = min(1.0, len(graph.relationships) / expected_pairs) if expected_pairs else 0.0

    claim_coverage = min(1.0, len(graph.claims) / entity_count / 2)

    score = CONFIDENCE_WEIGHT * avg_confidence + DENSITY_WEIGHT * density + CLAIM_WEIGHT * claim_coverage
    return max(0, min(100, round(score)))


def get_expertise_areas(graph: KnowledgeGraph) -> list[ExpertiseArea]:
    """Rank the graph's Concept names by how often they occur.

    Args:
        graph: Graph to analyze

    Returns:
        Up to ten topics, highest score first
    """
    if not graph.entities:
        return []

    counts = Counter(entity.name for entity in graph.entities if entity.type is EntityType.CONCEPT)
    total = len(graph.entities)
    return [
        ExpertiseArea(topic=topic, score=min(100.0, count / total * 1000))
        for topic, count in counts.most_common(MAX_EXPERTISE_AREAS)
    ]
