# ABOUTME: Tests for the high-level knowledge graph service
# ABOUTME: Covers parallel domain builds, progress reporting and ingestion into the global network

import pytest

from graphweave.core.errors import EmptyInputError
from graphweave.core.models import EffectType, Entity, EntityType, KnowledgeGraph, SourceDocument
from graphweave.core.network import GlobalEntityResolver
from graphweave.core.service import KnowledgeGraphService

DOCUMENTS = [
    SourceDocument(
        url="https://acme.example/news",
        html="<p>Jane Smith, CEO of Acme Inc, announced a 30% increase in revenue according to Acme Inc's Q3 report.</p>",
    ),
    SourceDocument(
        url="https://acme.example/about",
        html="<p>Acme Inc was founded by Jane Smith and builds industrial tools for everyone.</p>",
    ),
]


def organization_graph(domain: str, name: str = "OpenAI") -> KnowledgeGraph:
    entity = Entity(type=EntityType.ORGANIZATION, name=name, confidence=0.7, source_url=f"https://{domain}")
    return KnowledgeGraph(domain=domain, entities=[entity])


class TestBuildDomainGraph:
    """Test the parallel per-page build and merge."""

    @pytest.mark.asyncio
    async def test_pages_are_merged(self):
        service = KnowledgeGraphService()

        graph = await service.build_domain_graph("acme.example", DOCUMENTS)

        names = [entity.name for entity in graph.entities]
        assert graph.domain == "acme.example"
        assert graph.metadata.source_urls == [document.url for document in DOCUMENTS]
        assert graph.metadata.version == "1.1.0"
        assert "Jane Smith" in names
        assert len(set(names)) == len(names)

    @pytest.mark.asyncio
    async def test_progress_is_reported(self):
        service = KnowledgeGraphService()
        calls = []

        await service.build_domain_graph(
            "acme.example", DOCUMENTS, progress_callback=lambda url, done, total: calls.append((url, done, total))
        )

        assert sorted(done for _, done, _ in calls) == [1, 2]
        assert {url for url, _, _ in calls} == {document.url for document in DOCUMENTS}
        assert all(total == 2 for _, _, total in calls)

    @pytest.mark.asyncio
    async def test_no_documents_raises(self):
        with pytest.raises(EmptyInputError):
            await KnowledgeGraphService().build_domain_graph("acme.example", [])

    @pytest.mark.asyncio
    async def test_build_graph_single_page(self):
        graph = await KnowledgeGraphService().build_graph("acme.example", DOCUMENTS[0].html, DOCUMENTS[0].url)

        assert graph.metadata.version == "1.0.0"
        assert graph.metadata.entity_count == len(graph.entities) > 0


class TestIngest:
    """Test ingestion into the shared resolver."""

    @pytest.mark.asyncio
    async def test_second_domain_is_boosted(self):
        service = KnowledgeGraphService()
        await service.ingest(organization_graph("a.com"))
        graph_b = organization_graph("b.com")

        result = await service.ingest(graph_b)

        assert result.domain == "b.com"
        assert [effect.effect_type for effect in result.effects] == [EffectType.ENTITY_AMPLIFICATION]
        assert result.graph.entities[0].confidence == pytest.approx(0.9)
        assert graph_b.entities[0].confidence == 0.7
        assert result.quality_score == 36

    @pytest.mark.asyncio
    async def test_empty_graph_has_no_quality_score(self):
        result = await KnowledgeGraphService().ingest(KnowledgeGraph(domain="empty.example"))

        assert result.effects == []
        assert result.quality_score is None

    @pytest.mark.asyncio
    async def test_shared_resolver(self):
        resolver = GlobalEntityResolver()
        await KnowledgeGraphService(resolver).ingest(organization_graph("a.com"))

        await KnowledgeGraphService(resolver).ingest(organization_graph("b.com"))

        assert resolver.get_referencing_domains("OpenAI") == ["a.com", "b.com"]

    @pytest.mark.asyncio
    async def test_ingest_many_keeps_input_order(self):
        service = KnowledgeGraphService()
        graphs = [organization_graph(domain) for domain in ("a.com", "b.com", "c.com")]

        results = await service.ingest_many(graphs)

        assert [result.domain for result in results] == ["a.com", "b.com", "c.com"]
        assert results[0].effects == []
        assert sum(len(result.effects) for result in results) == 2
        assert service.resolver.get_global_entity("OpenAI").total_references == 3
