# ABOUTME: Tests for single-page graph assembly from markup
# ABOUTME: Covers the empty round trip, the full pipeline scenario and stage failure tolerance

from datetime import UTC, datetime
from unittest.mock import patch

from graphweave.core.assembler import KnowledgeGraphBuilder, assemble_graph, build_graph
from graphweave.core.models import EntityType, EvidenceType, RelationshipType
from graphweave.extraction.entities import EntityExtractor
from graphweave.extraction.relationships import RelationshipInferencer

SOURCE_URL = "https://acme.example/news"
JANE_HTML = """
<html>
  <head><style>.x { color: red; }</style></head>
  <body>
    <p>Jane Smith, CEO of Acme Inc, announced a 30% increase in revenue according to Acme Inc's Q3 report.</p>
    <script>track("Evil Corp visited");</script>
  </body>
</html>
"""


class TestAssembleGraph:
    """Test packaging of extracted records."""

    def test_empty_round_trip(self):
        graph = assemble_graph("acme.example", SOURCE_URL, [], [], [])

        assert graph.entities == []
        assert graph.relationships == []
        assert graph.claims == []
        assert graph.metadata.entity_count == 0
        assert graph.metadata.version == "1.0.0"
        assert graph.metadata.source_urls == [SOURCE_URL]

    def test_created_at_is_stamped(self):
        created_at = datetime(2024, 1, 1, tzinfo=UTC)

        graph = assemble_graph("acme.example", SOURCE_URL, [], [], [], created_at=created_at)

        assert graph.metadata.created_at == created_at
        assert graph.metadata.updated_at == created_at


class TestBuildGraph:
    """Test the markup to graph pipeline."""

    def test_empty_markup_gives_empty_graph(self):
        graph = build_graph("acme.example", "", SOURCE_URL)

        assert graph.domain == "acme.example"
        assert graph.entities == []
        assert graph.relationships == []
        assert graph.claims == []
        assert graph.metadata.entity_count == 0

    def test_jane_smith_scenario(self):
        graph = build_graph("acme.example", JANE_HTML, SOURCE_URL)

        names_by_type = {(entity.type, entity.name) for entity in graph.entities}
        assert (EntityType.PERSON, "Jane Smith") in names_by_type
        assert (EntityType.ORGANIZATION, "Acme Inc") in names_by_type
        assert (EntityType.METRIC, "30% increase") in names_by_type

        person = next(e for e in graph.entities if e.type is EntityType.PERSON)
        works_for = [r for r in graph.relationships if r.type is RelationshipType.WORKS_FOR]
        assert works_for
        for relationship in works_for:
            assert relationship.source == person.id
            assert graph.entity_by_id(relationship.target).name == "Acme Inc"
            assert relationship.confidence >= 0.75

        assert len(graph.claims) == 1
        assert EvidenceType.DATA in [evidence.type for evidence in graph.claims[0].evidence]

    def test_counts_match_collections(self):
        graph = build_graph("acme.example", JANE_HTML, SOURCE_URL)

        assert graph.metadata.entity_count == len(graph.entities)
        assert graph.metadata.relationship_count == len(graph.relationships)
        assert graph.metadata.claim_count == len(graph.claims)

    def test_script_content_is_ignored(self):
        graph = build_graph("acme.example", JANE_HTML, SOURCE_URL)

        assert all("Evil" not in entity.name for entity in graph.entities)


class TestKnowledgeGraphBuilder:
    """Test stage failure tolerance."""

    def test_failed_stage_yields_sparse_graph(self):
        with patch.object(RelationshipInferencer, "infer", side_effect=RuntimeError("boom")):
            graph = KnowledgeGraphBuilder("acme.example").build_from_html(JANE_HTML, SOURCE_URL)

        assert graph.entities
        assert graph.relationships == []
        assert graph.claims

    def test_domain_is_stamped(self):
        graph = KnowledgeGraphBuilder("acme.example").build_from_html(JANE_HTML, SOURCE_URL)

        assert graph.domain == "acme.example"
        assert graph.metadata.source_urls == [SOURCE_URL]

    def test_default_stages_follow_extractor_sentence_settings(self):
        builder = KnowledgeGraphBuilder("acme.example", entity_extractor=EntityExtractor(min_sentence_length=0))

        assert builder.relationship_inferencer.min_sentence_length == 0
        assert builder.claim_extractor.min_sentence_length == 0

    def test_short_page_with_relaxed_sentence_length(self):
        html = "<p>Alice Smith and Bob Jones met.</p>"
        builder = KnowledgeGraphBuilder("acme.example", entity_extractor=EntityExtractor(min_sentence_length=0))

        graph = builder.build_from_html(html, SOURCE_URL)

        assert {e.name for e in graph.entities} == {"Alice Smith", "Bob Jones"}
        assert graph.relationships
        assert {r.type for r in graph.relationships} == {RelationshipType.RELATED_TO}
