# ABOUTME: Tests for the rich table builders used by the CLI
# ABOUTME: Renders tables into a recording console and checks the visible content

from rich.console import Console
from rich.table import Table

from graphweave.core.models import (
    EffectType,
    Entity,
    EntityType,
    GlobalEntity,
    KnowledgeGraph,
    NetworkAnnotation,
    NetworkEffect,
    NetworkEffectsAnalysis,
)
from graphweave.utils.rich_tables import (
    create_entities_table,
    create_global_entities_table,
    create_graph_summary_table,
    create_key_value_table,
    create_logging_status_table,
    create_multi_column_table,
    create_network_analysis_table,
    create_network_effects_table,
    print_rich_table,
)


def render(table: Table) -> str:
    console = Console(record=True, width=200)
    console.print(table)
    return console.export_text()


def sample_graph() -> KnowledgeGraph:
    return KnowledgeGraph(
        domain="acme.example",
        entities=[
            Entity(type=EntityType.ORGANIZATION, name="Acme Inc", confidence=0.9, source_url="https://acme.example"),
            Entity(
                type=EntityType.PERSON,
                name="Jane Smith",
                confidence=0.4,
                source_url="https://acme.example",
                network=NetworkAnnotation(cross_domain_references=3),
            ),
        ],
    )


def sample_effect() -> NetworkEffect:
    return NetworkEffect(
        effect_type=EffectType.ENTITY_AMPLIFICATION,
        affected_entities=["entity_1", "entity_2"],
        affected_domains=["b.com", "a.com"],
        confidence_boost=0.2,
        authority_boost=30,
        citation_probability_lift=25,
        evidence_count=2,
        contributing_domains=["b.com", "a.com"],
    )


class TestBaseTables:
    """Test the generic table builders."""

    def test_key_value_table(self):
        table = create_key_value_table("Info", {"Name": "Acme"})

        assert len(table.columns) == 2
        assert "Acme" in render(table)

    def test_multi_column_table(self):
        table = create_multi_column_table("Rows", [("A", "cyan"), ("B", "green")], [["1", "2"], ["3", "4"]])

        assert len(table.columns) == 2
        assert table.row_count == 2


class TestGraphTables:
    """Test the graph-specific tables."""

    def test_graph_summary_includes_quality(self):
        text = render(create_graph_summary_table(sample_graph(), quality_score=64))

        assert "acme.example" in text
        assert "64/100" in text

    def test_graph_summary_without_quality(self):
        assert "Quality" not in render(create_graph_summary_table(sample_graph()))

    def test_entities_sorted_by_confidence(self):
        text = render(create_entities_table(sample_graph()))

        assert text.index("Acme Inc") < text.index("Jane Smith")
        assert "3 domains" in text

    def test_entities_limit(self):
        assert create_entities_table(sample_graph(), limit=1).row_count == 1


class TestNetworkTables:
    """Test the network tables."""

    def test_effects_table(self):
        text = render(create_network_effects_table([sample_effect()]))

        assert "entity_amplification" in text
        assert "b.com, a.com" in text
        assert "25%" in text

    def test_global_entities_table(self):
        entity = GlobalEntity(
            canonical_name="OpenAI",
            entity_type=EntityType.ORGANIZATION,
            referenced_by_domains=["a.com", "b.com"],
            confidence_score=0.9,
            authority_score=65,
        )

        text = render(create_global_entities_table([entity]))

        assert "OpenAI" in text
        assert "65" in text

    def test_network_analysis_table(self):
        analysis = NetworkEffectsAnalysis(
            total_global_entities=2,
            total_cross_domain_entities=1,
            network_density=1.0,
            total_authority_generated=95,
            avg_confidence_boost=0.2,
            total_citation_lift=15,
            top_global_entities=[],
            most_validated_relationships=[],
            strongest_network_effects=[],
            orphaned_entities=1,
            validated_entities=1,
            validation_rate=50.0,
        )

        text = render(create_network_analysis_table(analysis))

        assert "Network Analysis" in text
        assert "50.0%" in text


class TestLoggingStatusTable:
    """Test the logging status table."""

    def test_production_status(self):
        status = {
            "mode": "production",
            "log_directory": None,
            "log_files": {"main": None, "json": None, "errors": None},
            "third_party_suppressed": ["asyncio", "py.warnings"],
        }

        text = render(create_logging_status_table(status))

        assert "Production" in text
        assert "N/A (production mode)" in text
        assert "Main Log" not in text

    def test_print_rich_table(self):
        console = Console(record=True, width=120)

        print_rich_table(console, create_key_value_table("Info", {"Name": "Acme"}))

        assert "Acme" in console.export_text()
