# ABOUTME: Builds a KnowledgeGraph for one page from raw markup
# ABOUTME: Runs normalization, entity, relationship and claim extraction, then packages the records

from datetime import datetime

from graphweave.core.models import (
    INITIAL_GRAPH_VERSION,
    Claim,
    Entity,
    GraphMetadata,
    KnowledgeGraph,
    Relationship,
    utcnow,
)
from graphweave.extraction import ClaimExtractor, EntityExtractor, RelationshipInferencer, normalize_html
from graphweave.utils.logging import get_logger, log_extraction_step

logger = get_logger(__name__)


def assemble_graph(
    domain: str,
    source_url: str,
    entities: list[Entity],
    relationships: list[Relationship],
    claims: list[Claim],
    created_at: datetime | None = None,
) -> KnowledgeGraph:
    """Package extracted records into a fresh version 1.0.0 graph.

    Args:
        domain: Domain the page belongs to
        source_url: URL of the page
        entities: Extracted entities
        relationships: Inferred relationships
        claims: Extracted claims
        created_at: Creation timestamp (defaults to now)

    Returns:
        KnowledgeGraph with counts matching its collections
    """
    created_at = created_at or utcnow()
    return KnowledgeGraph(
        domain=domain,
        entities=list(entities),
        relationships=list(relationships),
        claims=list(claims),
        metadata=GraphMetadata(
            created_at=created_at,
            updated_at=created_at,
            version=INITIAL_GRAPH_VERSION,
            source_urls=[source_url],
        ),
    )


class KnowledgeGraphBuilder:
    """Per-domain pipeline from markup to a single-page graph.

    A failing extraction stage is logged and treated as having produced no
    records, so a build always returns a graph.
    """

    def __init__(
        self,
        domain: str,
        entity_extractor: EntityExtractor | None = None,
        relationship_inferencer: RelationshipInferencer | None = None,
        claim_extractor: ClaimExtractor | None = None,
    ):
        self.domain = domain
        self.entity_extractor = entity_extractor or EntityExtractor()
        # Default stages split sentences the same way as the entity extractor
        self.relationship_inferencer = relationship_inferencer or RelationshipInferencer(
            min_sentence_length=self.entity_extractor.min_sentence_length,
            snippet_length=self.entity_extractor.snippet_length,
        )
        self.claim_extractor = claim_extractor or ClaimExtractor(
            min_sentence_length=self.entity_extractor.min_sentence_length
        )
        self.logger = logger.bind(domain=domain)

    @log_extraction_step("extract_entities")
    def extract_entities(self, text: str, source_url: str, extracted_at: datetime) -> list[Entity]:
        return self.entity_extractor.extract(text, source_url, extracted_at)

    @log_extraction_step("infer_relationships")
    def infer_relationships(self, text: str, entities: list[Entity], extracted_at: datetime) -> list[Relationship]:
        return self.relationship_inferencer.infer(text, entities, extracted_at)

    @log_extraction_step("extract_claims")
    def extract_claims(self, text: str, entities: list[Entity], source_url: str) -> list[Claim]:
        return self.claim_extractor.extract(text, entities, source_url)

    def _run_stage(self, stage: str, func, *args) -> list:
        try:
            return func(*args)
        except Exception as e:
            self.logger.warning("Extraction stage failed, continuing with no records", stage=stage, error=str(e))
            return []

    def build_from_html(self, html: str, source_url: str) -> KnowledgeGraph:
        """Extract a graph from one page of markup.

        Args:
            html: Raw page markup
            source_url: URL the markup was fetched from

        Returns:
            KnowledgeGraph for the page (possibly with empty collections)
        """
        extracted_at = utcnow()
        text = normalize_html(html)

        entities = self._run_stage("entities", self.extract_entities, text, source_url, extracted_at)
        relationships = self._run_stage(
            "relationships", self.infer_relationships, text, entities, extracted_at
        )
        claims = self._run_stage("claims", self.extract_claims, text, entities, source_url)

        graph = assemble_graph(self.domain, source_url, entities, relationships, claims, created_at=extracted_at)
        self.logger.info(
            "Built knowledge graph",
            source_url=source_url,
            entity_count=graph.metadata.entity_count,
            relationship_count=graph.metadata.relationship_count,
            claim_count=graph.metadata.claim_count,
        )
        return graph


def build_graph(domain: str, html: str, source_url: str) -> KnowledgeGraph:
    """Build a single-page knowledge graph from raw markup."""
    return KnowledgeGraphBuilder(domain).build_from_html(html, source_url)
