# ABOUTME: Merges several same-domain knowledge graphs into one deduplicated graph
# ABOUTME: Dedupes by entity name, relationship key and claim statement, remapping dropped entity ids

from graphweave.core.errors import DomainMismatchError, EmptyInputError
from graphweave.core.models import (
    INITIAL_GRAPH_VERSION,
    Claim,
    Entity,
    GraphMetadata,
    KnowledgeGraph,
    Relationship,
    utcnow,
)
from graphweave.utils.logging import get_logger

logger = get_logger(__name__)


def _parse_version(version: str) -> tuple[int, int, int]:
    try:
        major, minor, patch = (int(part) for part in version.split("."))
    except ValueError:
        logger.warning("Unparseable graph version, treating as initial", version=version)
        return _parse_version(INITIAL_GRAPH_VERSION)
    return major, minor, patch


def next_version(versions: list[str]) -> str:
    """Bump the minor part of the highest version, e.g. ["1.0.0", "1.2.0"] -> "1.3.0"."""
    major, minor, _ = max(_parse_version(version) for version in versions)
    return f"{major}.{minor + 1}.0"


def merge_graphs(graphs: list[KnowledgeGraph]) -> KnowledgeGraph:
    """Merge same-domain graphs into a single graph.

    Entities are deduplicated by exact name (first occurrence wins) and the
    ids of dropped duplicates are rewritten to the surviving id in
    relationships and claims. Relationships are deduplicated by
    (source, type, target) after rewriting, and any that became self-loops
    are dropped. Claims are deduplicated by exact statement.

    Args:
        graphs: Graphs to merge, all for the same domain

    Returns:
        A new graph; a single input is returned as a deep copy

    Raises:
        EmptyInputError: If no graphs are given
        DomainMismatchError: If the graphs belong to different domains
    """
    if not graphs:
        raise EmptyInputError("merge_graphs requires at least one graph")

    domain = graphs[0].domain
    mismatched = sorted({graph.domain for graph in graphs if graph.domain != domain})
    if mismatched:
        raise DomainMismatchError(f"Cannot merge graphs of domain {domain!r} with {mismatched}")

    if len(graphs) == 1:
        return graphs[0].model_copy(deep=True)

    entities_by_name: dict[str, Entity] = {}
    id_remap: dict[str, str] = {}
    for graph in graphs:
        for entity in graph.entities:
            survivor = entities_by_name.get(entity.name)
            if survivor is None:
                entities_by_name[entity.name] = entity.model_copy(deep=True)
            else:
                id_remap[entity.id] = survivor.id

    relationships: dict[tuple[str, str, str], Relationship] = {}
    for graph in graphs:
        for relationship in graph.relationships:
            source = id_remap.get(relationship.source, relationship.source)
            target = id_remap.get(relationship.target, relationship.target)
            if source == target:
                continue
            key = (source, relationship.type.value, target)
            if key not in relationships:
                relationships[key] = relationship.model_copy(update={"source": source, "target": target}, deep=True)

    claims: dict[str, Claim] = {}
    for graph in graphs:
        for claim in graph.claims:
            if claim.statement in claims:
                continue
            remapped = list(dict.fromkeys(id_remap.get(entity_id, entity_id) for entity_id in claim.entities))
            claims[claim.statement] = claim.model_copy(update={"entities": remapped}, deep=True)

    source_urls = list(dict.fromkeys(url for graph in graphs for url in graph.metadata.source_urls))

    merged = KnowledgeGraph(
        domain=domain,
        entities=list(entities_by_name.values()),
        relationships=list(relationships.values()),
        claims=list(claims.values()),
        metadata=GraphMetadata(
            created_at=min(graph.metadata.created_at for graph in graphs),
            updated_at=utcnow(),
            version=next_version([graph.metadata.version for graph in graphs]),
            source_urls=source_urls,
        ),
    )

    logger.info(
        "Merged knowledge graphs",
        domain=domain,
        graph_count=len(graphs),
        entity_count=merged.metadata.entity_count,
        relationship_count=merged.metadata.relationship_count,
        claim_count=merged.metadata.claim_count,
        remapped_entities=len(id_remap),
    )
    return merged
