# ABOUTME: Pattern-based extraction of entities, relationships and claims from page text
# ABOUTME: Pipeline Stage 1: Raw markup → normalized text → provisional graph records

"""
Extraction Layer: Turn raw markup into graph records

This layer handles:
- Markup stripping and whitespace normalization
- Typed entity matching with false positive filtering
- Keyword-driven relationship classification between co-occurring entities
- Claim detection with citation, data and expert-opinion evidence

Data Flow: Raw markup → Plain text → Entities / Relationships / Claims → core/ assembly
"""

from .base import EntityMatcher, RelationshipClassifier
from .claims import ClaimExtractor
from .entities import EntityExtractor, guess_organization_url
from .relationships import KeywordRelationshipClassifier, RelationshipInferencer
from .text import normalize_html, split_sentences

__all__ = [
    "ClaimExtractor",
    "EntityExtractor",
    "EntityMatcher",
    "KeywordRelationshipClassifier",
    "RelationshipClassifier",
    "RelationshipInferencer",
    "guess_organization_url",
    "normalize_html",
    "split_sentences",
]
