# ABOUTME: Cross-domain global entity registry that turns repeated mentions into network effects
# ABOUTME: Per-key locked upserts for entities and relationships, effect application and network analysis

import asyncio
import re
from collections import defaultdict

from graphweave.config import get_config
from graphweave.core.models import (
    Citation,
    EffectType,
    Entity,
    EntityVariant,
    GlobalEntity,
    GlobalRelationship,
    KnowledgeGraph,
    NetworkAnnotation,
    NetworkEffect,
    NetworkEffectsAnalysis,
    Relationship,
    clamp_authority,
    clamp_confidence,
    utcnow,
)
from graphweave.utils.logging import get_logger

NON_WORD = re.compile(r"[^\w\s]")
WHITESPACE = re.compile(r"\s+")

# Keyed on the number of domains already referencing the entity before the new one
CONFIDENCE_BOOSTS = {1: 0.20, 2: 0.10, 3: 0.05}
AUTHORITY_BOOSTS = {1: 30.0, 2: 20.0, 3: 10.0}
CITATION_LIFTS = {1: 25.0, 2: 15.0, 3: 10.0}
TAIL_CONFIDENCE_BOOST = 0.02
TAIL_AUTHORITY_BOOST = 5.0
TAIL_CITATION_LIFT = 5.0

RELATIONSHIP_BOOST_FACTOR = 0.5
RELATIONSHIP_AUTHORITY_BOOST = 15.0
RELATIONSHIP_CITATION_LIFT = 10.0

CITATION_LIFT_PER_VALIDATED_ENTITY = 15.0
TOP_RELATIONSHIPS = 10
TOP_EFFECTS = 10


def normalize_entity_name(name: str) -> str:
    """Join key for matching entities across domains.

    Examples:
        "OpenAI" -> "openai"
        "  Acme,  Inc. " -> "acme inc"
    """
    return WHITESPACE.sub(" ", NON_WORD.sub("", name.lower())).strip()


def confidence_boost(domains_before: int) -> float:
    return CONFIDENCE_BOOSTS.get(domains_before, TAIL_CONFIDENCE_BOOST)


def authority_boost(domains_before: int) -> float:
    return AUTHORITY_BOOSTS.get(domains_before, TAIL_AUTHORITY_BOOST)


def citation_lift(domains_before: int) -> float:
    return CITATION_LIFTS.get(domains_before, TAIL_CITATION_LIFT)


def _mentions(citations: list[Citation], name: str) -> list[Citation]:
    needle = name.lower()
    return [citation for citation in citations if needle in citation.response.lower()]


def _append_unique(items: list[str], item: str) -> None:
    if item not in items:
        items.append(item)


def apply_network_effects(graph: KnowledgeGraph, effects: list[NetworkEffect]) -> KnowledgeGraph:
    """Write effect boosts onto a copy of a local graph.

    Each affected entity present in the graph gets the effect's confidence
    boost (clamped to 1.0) and a ``network`` annotation. Effects already
    recorded in an entity's annotation are skipped, so reapplying the same
    effects is a no-op.

    Args:
        graph: Caller's graph, left untouched
        effects: Effects emitted by the resolver

    Returns:
        Boosted deep copy of the graph
    """
    boosted = graph.model_copy(deep=True)
    entities = {entity.id: entity for entity in boosted.entities}

    for effect in effects:
        for entity_id in effect.affected_entities:
            entity = entities.get(entity_id)
            if entity is None:
                continue

            annotation = entity.network or NetworkAnnotation()
            if effect.effect_id in annotation.applied_effects:
                continue

            entity.confidence = clamp_confidence(entity.confidence + effect.confidence_boost)
            entity.network = NetworkAnnotation(
                validated=True,
                cross_domain_references=max(annotation.cross_domain_references, len(effect.contributing_domains)),
                authority_boost=clamp_authority(annotation.authority_boost + effect.authority_boost),
                applied_effects=[*annotation.applied_effects, effect.effect_id],
            )

    return boosted


class GlobalEntityResolver:
    """Long-lived registry of global entities and relationships across domains.

    ``upsert_entity`` and ``upsert_relationship`` are the only mutation entry
    points. Each key's read-modify-write runs under its own ``asyncio.Lock``,
    so concurrent ingestion of different domains only serializes on shared
    entities.
    """

    def __init__(self):
        self._entities: dict[str, GlobalEntity] = {}
        self._relationships: dict[tuple[str, str, str], GlobalRelationship] = {}
        self._effects: list[NetworkEffect] = []
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self.logger = get_logger(__name__)

    normalize_entity_name = staticmethod(normalize_entity_name)

    @property
    def global_entities(self) -> list[GlobalEntity]:
        return list(self._entities.values())

    @property
    def global_relationships(self) -> list[GlobalRelationship]:
        return list(self._relationships.values())

    @property
    def effects(self) -> list[NetworkEffect]:
        """Every effect emitted so far, oldest first."""
        return list(self._effects)

    def get_global_entity(self, name: str) -> GlobalEntity | None:
        return self._entities.get(normalize_entity_name(name))

    def get_referencing_domains(self, name: str) -> list[str]:
        global_entity = self.get_global_entity(name)
        return list(global_entity.referenced_by_domains) if global_entity else []

    async def upsert_entity(
        self,
        entity: Entity,
        domain: str,
        citations: list[Citation],
        local_ids: list[str] | None = None,
    ) -> NetworkEffect | None:
        """Track an entity for a domain, emitting an amplification effect for a new domain.

        Args:
            entity: Local entity being ingested
            domain: Domain whose graph the entity belongs to
            citations: AI platform responses used for citation counts
            local_ids: Ids of every same-key entity in the ingesting graph
                (defaults to the entity's own id)

        Returns:
            An entity_amplification effect, or None for a new or repeat reference
            and for names that normalize to an empty key
        """
        key = normalize_entity_name(entity.name)
        if not key:
            return None
        mentions = _mentions(citations, entity.name)
        local_ids = list(dict.fromkeys(local_ids or [entity.id]))
        variant = EntityVariant(
            domain=domain,
            local_entity_id=entity.id,
            local_entity_ids=local_ids,
            name_variant=entity.name,
            description=entity.description,
            url=entity.url,
        )

        async with self._locks[f"entity:{key}"]:
            global_entity = self._entities.get(key)

            if global_entity is None:
                self._entities[key] = GlobalEntity(
                    canonical_name=entity.name,
                    entity_type=entity.type,
                    referenced_by_domains=[domain],
                    total_references=1,
                    merged_description=entity.description or "",
                    confidence_score=clamp_confidence(entity.confidence),
                    authority_score=clamp_authority(entity.confidence * 50 + min(50, len(mentions) * 5)),
                    variants=[variant],
                    total_citations=len(mentions),
                    citation_platforms=list(dict.fromkeys(citation.source for citation in mentions)),
                )
                return None

            if domain in global_entity.referenced_by_domains:
                # Later copies from the same domain still receive future boosts
                for existing in global_entity.variants:
                    if existing.domain == domain:
                        for local_id in local_ids:
                            _append_unique(existing.local_entity_ids, local_id)
                return None

            domains_before = len(global_entity.referenced_by_domains)
            earlier_ids = [local_id for existing in global_entity.variants for local_id in existing.local_entity_ids]
            effect = NetworkEffect(
                effect_type=EffectType.ENTITY_AMPLIFICATION,
                affected_entities=list(dict.fromkeys([*local_ids, *earlier_ids])),
                affected_domains=[domain, *global_entity.referenced_by_domains],
                confidence_boost=confidence_boost(domains_before),
                authority_boost=authority_boost(domains_before),
                citation_probability_lift=citation_lift(domains_before),
                evidence_count=global_entity.total_references + 1,
                contributing_domains=[domain, *global_entity.referenced_by_domains],
            )

            global_entity.referenced_by_domains.append(domain)
            global_entity.total_references += 1
            global_entity.confidence_score = clamp_confidence(global_entity.confidence_score + effect.confidence_boost)
            global_entity.authority_score = clamp_authority(global_entity.authority_score + effect.authority_boost)
            global_entity.variants.append(variant)
            global_entity.last_updated = utcnow()

            if entity.description and entity.description not in global_entity.merged_description:
                global_entity.merged_description += f"\n\n[{domain}]: {entity.description}"

            global_entity.total_citations += len(mentions)
            for citation in mentions:
                _append_unique(global_entity.citation_platforms, citation.source)

            self._effects.append(effect)

        self.logger.info(
            "Cross-domain entity reference",
            entity=global_entity.canonical_name,
            domain=domain,
            domain_count=len(global_entity.referenced_by_domains),
            authority_score=global_entity.authority_score,
        )
        return effect

    async def upsert_relationship(
        self,
        relationship: Relationship,
        graph: KnowledgeGraph,
        citations: list[Citation] | None = None,
    ) -> NetworkEffect | None:
        """Track a relationship between two global entities for the graph's domain.

        Both endpoints must already be indexed; relationships whose endpoints
        are unknown, or resolve to the same global entity, are skipped.

        Args:
            relationship: Local relationship being ingested
            graph: Graph the relationship belongs to (used to resolve endpoints)
            citations: AI platform responses mentioning both endpoints count as citations

        Returns:
            A relationship_validation effect, or None for a new or repeat relationship
        """
        source = graph.entity_by_id(relationship.source)
        target = graph.entity_by_id(relationship.target)
        if source is None or target is None:
            return None

        source_global = self.get_global_entity(source.name)
        target_global = self.get_global_entity(target.name)
        if source_global is None or target_global is None:
            return None
        if source_global.global_entity_id == target_global.global_entity_id:
            return None

        key = (source_global.global_entity_id, relationship.type.value, target_global.global_entity_id)
        mentions = [c for c in _mentions(citations or [], source.name) if target.name.lower() in c.response.lower()]

        async with self._locks[f"rel:{':'.join(key)}"]:
            global_relationship = self._relationships.get(key)

            if global_relationship is None:
                self._relationships[key] = GlobalRelationship(
                    source_global_entity_id=source_global.global_entity_id,
                    target_global_entity_id=target_global.global_entity_id,
                    relationship_type=relationship.type,
                    supporting_domains=[graph.domain],
                    confidence_score=clamp_confidence(relationship.confidence),
                    citation_count=len(mentions),
                )
                for this, other in ((source_global, target_global), (target_global, source_global)):
                    _append_unique(this.connected_global_entities, other.global_entity_id)
                    this.relationship_count += 1
                return None

            if graph.domain in global_relationship.supporting_domains:
                return None

            domains_before = len(global_relationship.supporting_domains)
            effect = NetworkEffect(
                effect_type=EffectType.RELATIONSHIP_VALIDATION,
                affected_entities=[relationship.source, relationship.target],
                affected_domains=[graph.domain, *global_relationship.supporting_domains],
                confidence_boost=confidence_boost(domains_before) * RELATIONSHIP_BOOST_FACTOR,
                authority_boost=RELATIONSHIP_AUTHORITY_BOOST,
                citation_probability_lift=RELATIONSHIP_CITATION_LIFT,
                evidence_count=domains_before + 1,
                contributing_domains=[graph.domain, *global_relationship.supporting_domains],
            )

            global_relationship.supporting_domains.append(graph.domain)
            global_relationship.confidence_score = clamp_confidence(
                global_relationship.confidence_score + effect.confidence_boost
            )
            global_relationship.citation_count += len(mentions)
            self._effects.append(effect)

        return effect

    async def index_graph(self, graph: KnowledgeGraph, citations: list[Citation]) -> list[NetworkEffect]:
        """Index every entity, then every relationship, of a domain graph.

        Re-indexing a graph for a domain that is already tracked emits nothing.

        Args:
            graph: Domain graph to index
            citations: AI platform responses used for citation counts

        Returns:
            Effects emitted by this ingestion, entities first
        """
        ids_by_key: dict[str, list[str]] = defaultdict(list)
        for entity in graph.entities:
            ids_by_key[normalize_entity_name(entity.name)].append(entity.id)

        effects: list[NetworkEffect] = []
        for entity in graph.entities:
            key = normalize_entity_name(entity.name)
            if not key:
                self.logger.debug("Skipping entity without a usable name", domain=graph.domain, name=entity.name)
                continue
            effect = await self.upsert_entity(entity, graph.domain, citations, ids_by_key[key])
            if effect:
                effects.append(effect)

        for relationship in graph.relationships:
            effect = await self.upsert_relationship(relationship, graph, citations)
            if effect:
                effects.append(effect)

        self.logger.info(
            "Indexed knowledge graph",
            domain=graph.domain,
            entity_count=len(graph.entities),
            relationship_count=len(graph.relationships),
            effect_count=len(effects),
            global_entity_count=len(self._entities),
        )
        return effects

    def apply_network_effects(self, graph: KnowledgeGraph, effects: list[NetworkEffect]) -> KnowledgeGraph:
        return apply_network_effects(graph, effects)

    def analyze_network_effects(self) -> NetworkEffectsAnalysis:
        """Summarize the current state of the global network.

        Returns:
            NetworkEffectsAnalysis snapshot of entities, relationships and effect history
        """
        entities = self.global_entities
        relationships = self.global_relationships
        cross_domain = [entity for entity in entities if entity.is_cross_domain]

        possible_connections = len(entities) * (len(entities) - 1) / 2
        density = len(relationships) / possible_connections if possible_connections else 0.0

        amplifications = [e for e in self._effects if e.effect_type is EffectType.ENTITY_AMPLIFICATION]
        avg_boost = sum(e.confidence_boost for e in amplifications) / len(amplifications) if amplifications else 0.0

        return NetworkEffectsAnalysis(
            total_global_entities=len(entities),
            total_cross_domain_entities=len(cross_domain),
            network_density=density,
            total_authority_generated=sum(entity.authority_score for entity in entities),
            avg_confidence_boost=avg_boost,
            total_citation_lift=len(cross_domain) * CITATION_LIFT_PER_VALIDATED_ENTITY,
            top_global_entities=sorted(entities, key=lambda e: e.authority_score, reverse=True)[
                : get_config().max_top_global_entities
            ],
            most_validated_relationships=sorted(
                relationships, key=lambda r: len(r.supporting_domains), reverse=True
            )[:TOP_RELATIONSHIPS],
            strongest_network_effects=sorted(self._effects, key=lambda e: e.authority_boost, reverse=True)[
                :TOP_EFFECTS
            ],
            orphaned_entities=len(entities) - len(cross_domain),
            validated_entities=len(cross_domain),
            validation_rate=len(cross_domain) / len(entities) * 100 if entities else 0.0,
        )
