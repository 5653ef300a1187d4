# ABOUTME: Graph assembly, merging, cross-domain resolution and scoring layer
# ABOUTME: Pipeline Stage 2: Provisional records → Domain graphs → Global network index

"""
Core Layer: Knowledge graph business logic

This layer handles:
- Domain models for graphs and the cross-domain index
- Graph assembly from extracted records and same-domain merging
- Global entity resolution with network effects
- Quality scoring and JSON-LD export

Data Flow: extraction/ records → KnowledgeGraph → merged graph → global index → boosted graph
"""

from .errors import (
    DomainMismatchError,
    EmptyGraphError,
    EmptyInputError,
    GraphLoadError,
    GraphMergeError,
    GraphweaveError,
)
from .models import (
    Citation,
    Claim,
    EffectType,
    Entity,
    EntityType,
    GlobalEntity,
    GlobalRelationship,
    KnowledgeGraph,
    NetworkEffect,
    Relationship,
    RelationshipType,
)

# Import pipeline modules on-demand to avoid circular imports
# Use: from graphweave.core.assembler import build_graph
#      from graphweave.core.network import GlobalEntityResolver

__all__ = [
    "Citation",
    "Claim",
    "DomainMismatchError",
    "EffectType",
    "EmptyGraphError",
    "EmptyInputError",
    "Entity",
    "EntityType",
    "GlobalEntity",
    "GlobalRelationship",
    "GraphLoadError",
    "GraphMergeError",
    "GraphweaveError",
    "KnowledgeGraph",
    "NetworkEffect",
    "Relationship",
    "RelationshipType",
]
