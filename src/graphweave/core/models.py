# ABOUTME: Pydantic domain models for knowledge graphs and the cross-domain global index
# ABOUTME: Entities, relationships, claims, graphs, global entities and network effect records

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

INITIAL_GRAPH_VERSION = "1.0.0"


def utcnow() -> datetime:
    """Returns the current UTC timestamp."""

    return datetime.now(UTC)


def generate_id(prefix: str) -> str:
    """Generate an opaque identifier such as ``entity_3f2a9c1d04be``."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def clamp(value: float, low: float, high: float) -> float:
    """Clamp ``value`` into the closed interval ``[low, high]``."""
    return max(low, min(high, value))


def clamp_confidence(value: float) -> float:
    return clamp(float(value), 0.0, 1.0)


def clamp_authority(value: float) -> float:
    return clamp(float(value), 0.0, 100.0)


class EntityType(str, Enum):
    """Kinds of named things an entity can be."""

    PERSON = "Person"
    ORGANIZATION = "Organization"
    PRODUCT = "Product"
    SERVICE = "Service"
    CONCEPT = "Concept"
    TECHNOLOGY = "Technology"
    LOCATION = "Location"
    EVENT = "Event"
    CLAIM = "Claim"
    METRIC = "Metric"


class RelationshipType(str, Enum):
    """Typed, directed edge labels."""

    WORKS_FOR = "worksFor"
    OWNS = "owns"
    CREATES = "creates"
    SPECIALIZES = "specializes"
    RELATED_TO = "relatedTo"
    PROVES = "proves"
    CONTRADICTS = "contradicts"
    CITES = "cites"
    SUPPORTS = "supports"
    MEASURES = "measures"


class EvidenceType(str, Enum):
    CITATION = "citation"
    DATA = "data"
    EXPERT_OPINION = "expert_opinion"
    CASE_STUDY = "case_study"


class EffectType(str, Enum):
    """Kinds of network effect emitted by the global resolver."""

    ENTITY_AMPLIFICATION = "entity_amplification"
    RELATIONSHIP_VALIDATION = "relationship_validation"
    CLAIM_VALIDATION = "claim_validation"
    AUTHORITY_BOOST = "authority_boost"


class GraphModel(BaseModel):
    """Base for graph records, serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MetricProperties(GraphModel):
    """Payload carried by Metric entities (the only typed entity payload)."""

    kind: Literal["metric"] = "metric"
    schema_version: Literal[1] = 1
    value: str = Field(description="Numeric part as written, e.g. '30' or '$1,200'")
    unit: str = Field(description="Unit or trend word, e.g. '%', 'million', 'increase'")


class NetworkAnnotation(GraphModel):
    """Cross-domain validation details written back by apply_network_effects."""

    validated: bool = True
    cross_domain_references: int = Field(default=0, ge=0, description="Domains known to reference this entity")
    authority_boost: float = Field(default=0.0, ge=0.0, description="Accumulated authority boost from effects")
    applied_effects: list[str] = Field(default_factory=list, description="Effect ids already applied")


class Entity(GraphModel):
    """A named thing extracted from text."""

    id: str = Field(default_factory=lambda: generate_id("entity"))
    type: EntityType
    name: str
    description: str | None = None
    url: str | None = None
    properties: MetricProperties | None = None
    network: NetworkAnnotation | None = None
    confidence: float = Field(description="Extraction confidence (0.0-1.0)")
    source_url: str
    source_context: str | None = Field(default=None, description="Snippet of the sentence the entity came from")
    extracted_at: datetime = Field(default_factory=utcnow)

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: float) -> float:
        return clamp_confidence(value)

    @model_validator(mode="after")
    def _check_properties(self) -> "Entity":
        if self.properties is not None and self.type is not EntityType.METRIC:
            raise ValueError(f"{self.type.value} entities carry no properties payload")
        return self


class Relationship(GraphModel):
    """A typed, directed, confidence-scored edge between two entities."""

    id: str = Field(default_factory=lambda: generate_id("rel"))
    type: RelationshipType
    source: str = Field(description="Source entity id")
    target: str = Field(description="Target entity id")
    confidence: float
    context: str | None = None
    extracted_at: datetime = Field(default_factory=utcnow)

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: float) -> float:
        return clamp_confidence(value)

    @model_validator(mode="after")
    def _check_endpoints(self) -> "Relationship":
        if self.source == self.target:
            raise ValueError("relationship source and target must differ")
        return self


class Evidence(GraphModel):
    type: EvidenceType
    source: str
    url: str | None = None


class TemporalValidity(GraphModel):
    valid_from: datetime | None = None
    valid_until: datetime | None = None


class Claim(GraphModel):
    """A factual statement tied to entities and optional evidence."""

    id: str = Field(default_factory=lambda: generate_id("claim"))
    statement: str
    entities: list[str] = Field(default_factory=list, description="Ids of entities mentioned in the claim")
    evidence: list[Evidence] = Field(default_factory=list)
    confidence: float
    temporal: TemporalValidity | None = None

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: float) -> float:
        return clamp_confidence(value)


class GraphMetadata(GraphModel):
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    version: str = INITIAL_GRAPH_VERSION
    source_urls: list[str] = Field(default_factory=list)
    entity_count: int = 0
    relationship_count: int = 0
    claim_count: int = 0


class KnowledgeGraph(GraphModel):
    """Entity, relationship and claim collection for one domain at one version.

    The three ``*_count`` metadata fields always mirror the collection lengths:
    they are recomputed whenever a graph is constructed or validated, and
    callers that mutate the collections in place should call
    :meth:`refresh_counts` afterwards.
    """

    id: str = Field(default_factory=lambda: generate_id("kg"))
    domain: str
    entities: list[Entity] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)
    claims: list[Claim] = Field(default_factory=list)
    metadata: GraphMetadata = Field(default_factory=GraphMetadata)

    @model_validator(mode="after")
    def _sync_counts(self) -> "KnowledgeGraph":
        self.refresh_counts()
        return self

    def refresh_counts(self) -> None:
        self.metadata.entity_count = len(self.entities)
        self.metadata.relationship_count = len(self.relationships)
        self.metadata.claim_count = len(self.claims)

    def entity_by_id(self, entity_id: str) -> Entity | None:
        for entity in self.entities:
            if entity.id == entity_id:
                return entity
        return None


class Citation(BaseModel):
    """A single AI-platform response that may mention entities (external collaborator record)."""

    response: str = Field(description="Full response text returned by the platform")
    source: str = Field(description="Platform the response came from, e.g. 'perplexity'")


class EntityVariant(BaseModel):
    """One domain's local copy of a global entity."""

    domain: str
    local_entity_id: str
    local_entity_ids: list[str] = Field(
        default_factory=list, description="Every same-name entity id this domain has contributed"
    )
    name_variant: str
    description: str | None = None
    url: str | None = None


class GlobalEntity(BaseModel):
    """Cross-domain canonical identity for same-named entities."""

    global_entity_id: str = Field(default_factory=lambda: generate_id("global_entity"))
    canonical_name: str
    entity_type: EntityType

    referenced_by_domains: list[str] = Field(default_factory=list, description="Each domain appears at most once")
    total_references: int = 1

    merged_description: str = ""
    confidence_score: float = Field(description="Cross-domain confidence (0.0-1.0)")
    authority_score: float = Field(description="Cross-domain authority (0-100)")

    variants: list[EntityVariant] = Field(default_factory=list)

    total_citations: int = 0
    citation_platforms: list[str] = Field(default_factory=list)
    first_seen: datetime = Field(default_factory=utcnow)
    last_updated: datetime = Field(default_factory=utcnow)

    connected_global_entities: list[str] = Field(default_factory=list)
    relationship_count: int = 0

    @property
    def is_cross_domain(self) -> bool:
        return len(self.referenced_by_domains) > 1


class GlobalRelationship(BaseModel):
    """Relationship between two global entities, corroborated by one or more domains."""

    source_global_entity_id: str
    target_global_entity_id: str
    relationship_type: RelationshipType
    supporting_domains: list[str] = Field(default_factory=list)
    confidence_score: float
    citation_count: int = 0

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.source_global_entity_id, self.relationship_type.value, self.target_global_entity_id)


class NetworkEffect(BaseModel):
    """Immutable record of one cross-domain boosting event."""

    model_config = ConfigDict(frozen=True)

    effect_id: str = Field(default_factory=lambda: generate_id("effect"))
    effect_type: EffectType
    affected_entities: list[str] = Field(description="Local entity ids the boost applies to")
    affected_domains: list[str]

    confidence_boost: float = Field(ge=0.0, le=1.0)
    authority_boost: float = Field(ge=0.0, le=100.0)
    citation_probability_lift: float = Field(ge=0.0, le=100.0, description="Predicted lift in percent")

    evidence_count: int
    contributing_domains: list[str]
    created_at: datetime = Field(default_factory=utcnow)


class NetworkEffectsAnalysis(BaseModel):
    """Snapshot summary of the global index."""

    total_global_entities: int
    total_cross_domain_entities: int
    network_density: float

    total_authority_generated: float
    avg_confidence_boost: float
    total_citation_lift: float

    top_global_entities: list[GlobalEntity]
    most_validated_relationships: list[GlobalRelationship]
    strongest_network_effects: list[NetworkEffect]

    orphaned_entities: int
    validated_entities: int
    validation_rate: float = Field(description="Percentage of global entities referenced by 2+ domains")


class ExpertiseArea(BaseModel):
    topic: str
    score: float


class SourceDocument(BaseModel):
    """One fetched page handed to the pipeline (fetching itself happens elsewhere)."""

    url: str
    html: str


class IngestionResult(BaseModel):
    """Outcome of indexing one domain graph into the global network."""

    domain: str
    graph: KnowledgeGraph = Field(description="Caller's graph with network effects applied")
    effects: list[NetworkEffect] = Field(default_factory=list)
    quality_score: int | None = Field(default=None, description="Quality of the boosted graph, None if it is empty")
