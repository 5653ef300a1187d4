# ABOUTME: High-level service API orchestrating graph building, merging and network ingestion
# ABOUTME: Fans page extraction out to worker threads and owns the long-lived global resolver

import asyncio
from collections.abc import Callable, Iterable

from graphweave.core.assembler import KnowledgeGraphBuilder
from graphweave.core.errors import EmptyGraphError, EmptyInputError
from graphweave.core.merger import merge_graphs
from graphweave.core.models import Citation, IngestionResult, KnowledgeGraph, SourceDocument
from graphweave.core.network import GlobalEntityResolver, apply_network_effects
from graphweave.core.quality import calculate_graph_quality
from graphweave.utils.logging import get_logger, with_operation_context


class KnowledgeGraphService:
    """Service for building domain graphs and feeding them into the global network."""

    def __init__(self, resolver: GlobalEntityResolver | None = None):
        self.resolver = resolver or GlobalEntityResolver()
        self.logger = get_logger(__name__)

    async def build_graph(self, domain: str, html: str, source_url: str) -> KnowledgeGraph:
        """Build a single-page graph on a worker thread."""
        builder = KnowledgeGraphBuilder(domain)
        return await asyncio.to_thread(builder.build_from_html, html, source_url)

    @with_operation_context("build_domain_graph")
    async def build_domain_graph(
        self,
        domain: str,
        documents: Iterable[SourceDocument],
        progress_callback: Callable[[str, int, int], None] | None = None,
    ) -> KnowledgeGraph:
        """Build one graph per page in parallel and merge them.

        Args:
            domain: Domain every page belongs to
            documents: Pages fetched for the domain
            progress_callback: Called with (url, completed, total) as pages finish

        Returns:
            Merged domain graph

        Raises:
            EmptyInputError: If no documents are given
        """
        documents = list(documents)
        if not documents:
            raise EmptyInputError(f"No documents to build a graph for {domain}")

        total = len(documents)
        completed = 0

        async def build_one(document: SourceDocument) -> KnowledgeGraph:
            nonlocal completed
            graph = await self.build_graph(domain, document.html, document.url)
            completed += 1
            if progress_callback:
                progress_callback(document.url, completed, total)
            return graph

        graphs = await asyncio.gather(*(build_one(document) for document in documents))
        merged = merge_graphs(list(graphs))

        self.logger.info(
            "Built domain graph",
            domain=domain,
            document_count=total,
            entity_count=merged.metadata.entity_count,
            relationship_count=merged.metadata.relationship_count,
        )
        return merged

    async def ingest(self, graph: KnowledgeGraph, citations: list[Citation] | None = None) -> IngestionResult:
        """Index a domain graph globally and apply the resulting effects to a copy of it.

        Args:
            graph: Domain graph to ingest
            citations: AI platform responses used for citation counts

        Returns:
            IngestionResult with the boosted graph and the emitted effects
        """
        effects = await self.resolver.index_graph(graph, citations or [])
        boosted = apply_network_effects(graph, effects)

        try:
            quality_score = calculate_graph_quality(boosted)
        except EmptyGraphError:
            quality_score = None

        self.logger.info(
            "Ingested domain graph",
            domain=graph.domain,
            effect_count=len(effects),
            quality_score=quality_score,
        )
        return IngestionResult(domain=graph.domain, graph=boosted, effects=effects, quality_score=quality_score)

    @with_operation_context("ingest_many")
    async def ingest_many(
        self, graphs: Iterable[KnowledgeGraph], citations: list[Citation] | None = None
    ) -> list[IngestionResult]:
        """Ingest several domain graphs concurrently, in input order.

        Effects are applied per graph, so each result only carries the effects
        emitted while that graph was being indexed.
        """
        return list(await asyncio.gather(*(self.ingest(graph, citations) for graph in graphs)))
