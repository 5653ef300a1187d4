# ABOUTME: Detection of factual claims and the evidence that backs them
# ABOUTME: Links claim sentences to mentioned entities and grades confidence by evidence

import re

from graphweave.config import get_config
from graphweave.core.models import Claim, Entity, Evidence, EvidenceType
from graphweave.extraction.entities import MetricMatcher
from graphweave.extraction.text import split_sentences
from graphweave.utils.logging import get_logger

CLAIM_INDICATORS = [
    re.compile(r"\baccording to\b", re.IGNORECASE),
    re.compile(r"\bresearch shows\b", re.IGNORECASE),
    re.compile(r"\bstudies indicate\b", re.IGNORECASE),
    re.compile(r"\bproven to\b", re.IGNORECASE),
    re.compile(r"\bdemonstrated that\b", re.IGNORECASE),
    re.compile(r"\bevidence suggests\b", re.IGNORECASE),
    re.compile(r"\d+%?\s+(?:increase|decrease|growth|improvement)", re.IGNORECASE),
]

CITATION_PATTERN = re.compile(r"\[(\d+)\]|\(([^)]+,\s*\d{4})\)")
DATA_PATTERN = re.compile(r"\d+(?:,\d{3})*(?:\.\d+)?")
EXPERT_PATTERN = re.compile(r"(?:Dr\.|Professor|CEO|Expert)\s+[A-Z][a-z]+")

EVIDENCED_CONFIDENCE = 0.8
UNSUPPORTED_CONFIDENCE = 0.5


def extract_evidence(sentence: str, source_url: str) -> list[Evidence]:
    """Collect citation, numeric-data and expert-opinion evidence from one sentence.

    Args:
        sentence: Claim sentence
        source_url: URL the sentence was taken from, attached to data evidence

    Returns:
        At most one evidence record per kind, in citation/data/expert order
    """
    evidence = []

    if citation := CITATION_PATTERN.search(sentence):
        evidence.append(Evidence(type=EvidenceType.CITATION, source=citation.group(0)))

    if DATA_PATTERN.search(sentence):
        evidence.append(Evidence(type=EvidenceType.DATA, source=sentence, url=source_url))

    if expert := EXPERT_PATTERN.search(sentence):
        evidence.append(Evidence(type=EvidenceType.EXPERT_OPINION, source=expert.group(0)))

    return evidence


class ClaimExtractor:
    """Finds sentences that assert something checkable."""

    def __init__(self, min_sentence_length: int | None = None):
        if min_sentence_length is None:
            min_sentence_length = get_config().min_sentence_length
        self.min_sentence_length = min_sentence_length
        self.metrics = MetricMatcher()
        self.logger = get_logger(__name__)

    def is_claim(self, sentence: str) -> bool:
        return any(pattern.search(sentence) for pattern in CLAIM_INDICATORS) or self.metrics.contains_metric(
            sentence
        )

    def extract(self, text: str, entities: list[Entity], source_url: str) -> list[Claim]:
        """Extract claims from normalized text.

        Args:
            text: Normalized plain text
            entities: Entities extracted from the same text
            source_url: URL of the page the text came from

        Returns:
            Claims that mention at least one entity or carry evidence
        """
        claims: list[Claim] = []

        for sentence in split_sentences(text, self.min_sentence_length):
            if not self.is_claim(sentence):
                continue

            entity_ids = [entity.id for entity in entities if entity.name in sentence]
            evidence = extract_evidence(sentence, source_url)
            if not entity_ids and not evidence:
                continue

            claims.append(
                Claim(
                    statement=sentence.strip(),
                    entities=entity_ids,
                    evidence=evidence,
                    confidence=EVIDENCED_CONFIDENCE if evidence else UNSUPPORTED_CONFIDENCE,
                )
            )

        self.logger.debug("Extracted claims", claim_count=len(claims), source_url=source_url)
        return claims
