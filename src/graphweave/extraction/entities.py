# ABOUTME: Typed regex matchers for Organization, Person, Metric and Concept entities
# ABOUTME: Emits provisional entities per sentence with per-type confidence and a source snippet

import re
from datetime import datetime

from graphweave.config import get_config
from graphweave.core.models import Entity, EntityType, MetricProperties, utcnow
from graphweave.extraction.base import EntityMatcher
from graphweave.extraction.text import split_sentences
from graphweave.utils.logging import get_logger

LEGAL_MARKER = re.compile(r"\b(?:Inc|LLC|Corp|Corporation|Ltd|Limited|Group|AG|GmbH)$")
ARTICLE_NOUN = re.compile(r"^(?:The|A|An)\s+[A-Z][a-z]+$")

STOP_WORDS = frozenset(
    {
        "The", "This", "That", "These", "Those", "When", "Where", "What", "Why", "How",
        "First", "Second", "Third", "Last", "Next", "Previous", "Some", "Many", "Most",
        "All", "Both", "Each", "Every", "Other", "Another", "Such", "More", "Less",
    }
)  # fmt: skip

# Exact single-word brands with a known homepage. Anything else gets no URL.
KNOWN_ORGANIZATION_DOMAINS = {
    "google": "google.com",
    "facebook": "facebook.com",
    "meta": "meta.com",
    "microsoft": "microsoft.com",
    "apple": "apple.com",
    "amazon": "amazon.com",
    "netflix": "netflix.com",
    "tesla": "tesla.com",
    "twitter": "twitter.com",
    "linkedin": "linkedin.com",
}

LEGAL_SUFFIX = re.compile(r"\s+(?:inc|llc|corp(?:oration)?|ltd|limited|group|ag|gmbh)\.?$", re.IGNORECASE)


def guess_organization_url(name: str) -> str | None:
    """Resolve a homepage for well-known single-word brands only.

    Examples:
        "Google Inc" -> "https://google.com"
        "Acme Widgets Corp" -> None

    Args:
        name: Organization name as extracted

    Returns:
        Homepage URL or None when no exact match exists
    """
    normalized = LEGAL_SUFFIX.sub("", name.strip()).lower()
    if not normalized or " " in normalized:
        return None
    domain = KNOWN_ORGANIZATION_DOMAINS.get(normalized)
    return f"https://{domain}" if domain else None


class OrganizationMatcher:
    """Capitalized multi-word phrases, optionally ending in a legal-entity marker."""

    entity_type = EntityType.ORGANIZATION
    confidence = 0.7

    PATTERN = re.compile(
        r"\b([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*(?:\s+(?:Inc|LLC|Corp|Corporation|Ltd|Limited|Group|AG|GmbH))?)\b"
    )

    def find(self, sentence: str) -> list[tuple[str, MetricProperties | None]]:
        return [(name, None) for name in self._candidates(sentence) if self.is_valid(name)]

    def _candidates(self, sentence: str) -> list[str]:
        return [match.group(1).strip() for match in self.PATTERN.finditer(sentence)]

    @staticmethod
    def is_valid(name: str) -> bool:
        if name in STOP_WORDS:
            return False
        if ARTICLE_NOUN.match(name):
            return False
        return len(name.split()) >= 2 or bool(LEGAL_MARKER.search(name))


class PersonMatcher:
    """Two to four capitalized words that do not end in a legal-entity marker."""

    entity_type = EntityType.PERSON
    confidence = 0.6

    PATTERN = re.compile(r"\b([A-Z][a-z]+(?:\s+[A-Z][a-z]+){1,3})\b")

    def find(self, sentence: str) -> list[tuple[str, MetricProperties | None]]:
        names = (match.group(1).strip() for match in self.PATTERN.finditer(sentence))
        return [(name, None) for name in names if self.is_valid(name)]

    @staticmethod
    def is_valid(name: str) -> bool:
        parts = name.split()
        if not 2 <= len(parts) <= 4 or len(name) >= 40:
            return False
        return not LEGAL_MARKER.search(name)


class MetricMatcher:
    """Numbers with a unit, scale word and/or growth word, e.g. '30% increase', '$5 million'."""

    entity_type = EntityType.METRIC
    confidence = 0.9

    PATTERN = re.compile(
        r"(?<![\w.,$€£])(?P<value>[$€£]?\d+(?:,\d{3})*(?:\.\d+)?)"
        r"(?:\s*(?P<unit>%|(?:percent|thousand|million|billion|trillion|dollars|euros|users|customers)\b))?"
        r"(?:\s*(?P<trend>increase|decrease|growth|improvement|reduction)\b)?",
        re.IGNORECASE,
    )

    def find(self, sentence: str) -> list[tuple[str, MetricProperties | None]]:
        found = []
        for match in self.PATTERN.finditer(sentence):
            unit = match.group("unit") or match.group("trend")
            if not unit:
                continue
            name = " ".join(match.group(0).split())
            found.append((name, MetricProperties(value=match.group("value"), unit=unit)))
        return found

    def contains_metric(self, sentence: str) -> bool:
        return any(match.group("unit") or match.group("trend") for match in self.PATTERN.finditer(sentence))


class ConceptMatcher:
    """Double-quoted or back-ticked phrases longer than three characters."""

    entity_type = EntityType.CONCEPT
    confidence = 0.5

    PATTERN = re.compile(r'"([^"]+)"|`([^`]+)`')

    def find(self, sentence: str) -> list[tuple[str, MetricProperties | None]]:
        found = []
        for match in self.PATTERN.finditer(sentence):
            concept = (match.group(1) or match.group(2)).strip()
            if len(concept) > 3:
                found.append((concept, None))
        return found


def default_matchers() -> list[EntityMatcher]:
    return [OrganizationMatcher(), PersonMatcher(), MetricMatcher(), ConceptMatcher()]


class EntityExtractor:
    """Scans normalized text sentence by sentence with typed matchers.

    Same-name mentions are kept as separate entities; identity by name is
    resolved later by the graph merger and the global resolver.
    """

    def __init__(
        self,
        matchers: list[EntityMatcher] | None = None,
        min_sentence_length: int | None = None,
        snippet_length: int | None = None,
    ):
        config = get_config()
        self.matchers = matchers if matchers is not None else default_matchers()
        self.min_sentence_length = config.min_sentence_length if min_sentence_length is None else min_sentence_length
        self.snippet_length = config.snippet_length if snippet_length is None else snippet_length
        self.logger = get_logger(__name__)

    def extract(self, text: str, source_url: str, extracted_at: datetime | None = None) -> list[Entity]:
        """Extract provisional entities from normalized text.

        Args:
            text: Normalized plain text
            source_url: URL of the page the text came from
            extracted_at: Timestamp stamped on every entity (defaults to now)

        Returns:
            Entities in sentence order, then matcher order within a sentence
        """
        extracted_at = extracted_at or utcnow()
        entities: list[Entity] = []

        for sentence in split_sentences(text, self.min_sentence_length):
            snippet = sentence[: self.snippet_length]
            for matcher in self.matchers:
                for name, properties in matcher.find(sentence):
                    entities.append(
                        Entity(
                            type=matcher.entity_type,
                            name=name,
                            url=guess_organization_url(name) if matcher.entity_type is EntityType.ORGANIZATION else None,
                            properties=properties,
                            confidence=matcher.confidence,
                            source_url=source_url,
                            source_context=snippet,
                            extracted_at=extracted_at,
                        )
                    )

        self.logger.debug("Extracted entities", entity_count=len(entities), source_url=source_url)
        return entities
