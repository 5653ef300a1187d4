# ABOUTME: Main CLI application entry point using asyncclick for native async support
# ABOUTME: Provides commands for building, merging and cross-domain indexing of knowledge graphs

import json as jsonlib
from pathlib import Path

import asyncclick as click
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.panel import Panel

from graphweave.config import get_config
from graphweave.core.errors import EmptyGraphError, GraphLoadError, GraphMergeError
from graphweave.core.export import to_json_ld
from graphweave.core.merger import merge_graphs
from graphweave.core.models import Citation, KnowledgeGraph
from graphweave.core.quality import calculate_graph_quality
from graphweave.core.service import KnowledgeGraphService
from graphweave.utils.logging import (
    LoggingMode,
    configure_logging,
    create_smart_progress,
    get_logging_status,
    with_domain_context,
    with_pipeline_context,
)
from graphweave.utils.rich_tables import (
    create_entities_table,
    create_global_entities_table,
    create_graph_summary_table,
    create_logging_status_table,
    create_network_analysis_table,
    create_network_effects_table,
    print_rich_table,
)

console = Console()

CITATIONS_ADAPTER = TypeAdapter(list[Citation])


async def _run_with_progress(coro, message: str, json_output: bool):
    """Run async operation behind a spinner unless JSON output is requested."""
    if json_output:
        return await coro

    progress, _, _ = create_smart_progress(console, message)
    with progress:
        return await coro


def load_graph(path: Path) -> KnowledgeGraph:
    """Load a serialized knowledge graph.

    Raises:
        GraphLoadError: If the file cannot be read or is not a valid graph
    """
    try:
        return KnowledgeGraph.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        raise GraphLoadError(f"Could not load knowledge graph from {path}: {e}") from e


def load_citations(path: Path | None) -> list[Citation]:
    """Load a JSON list of ``{"response": ..., "source": ...}`` records."""
    if path is None:
        return []
    try:
        return CITATIONS_ADAPTER.validate_json(path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        raise GraphLoadError(f"Could not load citations from {path}: {e}") from e


def dump_graph(graph: KnowledgeGraph, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(graph.model_dump_json(by_alias=True, indent=2), encoding="utf-8")


def _quality_or_none(graph: KnowledgeGraph) -> int | None:
    try:
        return calculate_graph_quality(graph)
    except EmptyGraphError:
        return None


def _display_graph(graph: KnowledgeGraph) -> None:
    print_rich_table(console, create_graph_summary_table(graph, _quality_or_none(graph)))
    if graph.entities:
        print_rich_table(console, create_entities_table(graph))


def _load_graphs_or_fail(paths: tuple[Path, ...]) -> list[KnowledgeGraph]:
    try:
        return [load_graph(path) for path in paths]
    except GraphLoadError as e:
        raise click.ClickException(str(e)) from e


@click.command()
@click.argument("domain")
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--source-url", help="URL the markup was fetched from (defaults to the file URI)")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write the graph as JSON")
@click.option("--jsonld", type=click.Path(dir_okay=False, path_type=Path), help="Write a JSON-LD export")
@click.pass_context
async def build(ctx, domain: str, html_file: Path, source_url: str | None, output: Path | None, jsonld: Path | None):
    """
    🕸️ Build a knowledge graph from one HTML page.

    Extracts entities, relationships and claims from the page markup.
    """
    json_output = ctx.obj["json_output"]
    source_url = source_url or html_file.resolve().as_uri()

    with with_domain_context(domain) as logger:
        logger.info("Building knowledge graph", html_file=str(html_file), source_url=source_url)

        html = html_file.read_text(encoding="utf-8", errors="replace")
        service = KnowledgeGraphService()
        graph = await _run_with_progress(
            service.build_graph(domain, html, source_url), f"🕸️ Weaving graph for {domain}...", json_output
        )

        if output:
            dump_graph(graph, output)
            logger.info("Wrote knowledge graph", output=str(output))
        if jsonld:
            jsonld.parent.mkdir(parents=True, exist_ok=True)
            jsonld.write_text(jsonlib.dumps(to_json_ld(graph), indent=2), encoding="utf-8")
            logger.info("Wrote JSON-LD export", output=str(jsonld))

        if not json_output:
            _display_graph(graph)
        elif not output:
            click.echo(graph.model_dump_json(by_alias=True))


@click.command()
@click.argument("graph_files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write the merged graph")
@click.pass_context
async def merge(ctx, graph_files: tuple[Path, ...], output: Path | None):
    """
    🧵 Merge several graphs of the same domain into one.
    """
    json_output = ctx.obj["json_output"]
    graphs = _load_graphs_or_fail(graph_files)

    try:
        merged = merge_graphs(graphs)
    except GraphMergeError as e:
        raise click.ClickException(str(e)) from e

    if output:
        dump_graph(merged, output)

    if not json_output:
        _display_graph(merged)
    elif not output:
        click.echo(merged.model_dump_json(by_alias=True))


@click.command()
@click.argument("graph_files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--citations",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON list of AI platform responses ({response, source})",
)
@click.option(
    "--output-dir", type=click.Path(file_okay=False, path_type=Path), help="Write boosted graphs to this directory"
)
@click.pass_context
async def network(ctx, graph_files: tuple[Path, ...], citations: Path | None, output_dir: Path | None):
    """
    🌍 Index graphs from several domains into the global network.

    Entities mentioned by more than one domain gain confidence and authority.
    """
    json_output = ctx.obj["json_output"]
    graphs = _load_graphs_or_fail(graph_files)
    try:
        citation_records = load_citations(citations)
    except GraphLoadError as e:
        raise click.ClickException(str(e)) from e

    with with_pipeline_context("network_indexing", graph_count=len(graphs)) as logger:
        service = KnowledgeGraphService()
        results = await _run_with_progress(
            service.ingest_many(graphs, citation_records), "🌍 Indexing global network...", json_output
        )

        if output_dir:
            for result in results:
                dump_graph(result.graph, output_dir / f"{result.domain}_{result.graph.id}.json")
            logger.info("Wrote boosted graphs", output_dir=str(output_dir), graph_count=len(results))

        analysis = service.resolver.analyze_network_effects()
        effects = [effect for result in results for effect in result.effects]
        logger.info(
            "Network indexing complete",
            effect_count=len(effects),
            cross_domain_entities=analysis.total_cross_domain_entities,
        )

        if json_output:
            click.echo(analysis.model_dump_json())
            return

        console.print(
            Panel.fit(
                f"🌍 [bold cyan]Global Network[/bold cyan]\n"
                f"{len(graphs)} graphs · {analysis.total_global_entities} global entities",
                border_style="magenta",
            )
        )
        print_rich_table(console, create_network_analysis_table(analysis))
        if effects:
            print_rich_table(console, create_network_effects_table(effects))
        cross_domain = [entity for entity in analysis.top_global_entities if entity.is_cross_domain]
        if cross_domain:
            print_rich_table(console, create_global_entities_table(cross_domain))


def _initialize_logging(json_output: bool, log_level: str | None = None, log_file: str | None = None) -> None:
    """Initialize logging configuration."""
    config = get_config()
    mode = LoggingMode.PRODUCTION if json_output else LoggingMode.INTERACTIVE

    # Use config defaults when CLI parameters are not provided
    final_log_level = log_level or config.log_level
    final_log_file = log_file or (str(config.log_file) if config.log_file else None)

    configure_logging(mode=mode, log_level=final_log_level, log_file=final_log_file)


@click.command(name="logging-status")
def logging_status():
    """
    📊 Show current logging configuration and status.
    """
    status = get_logging_status()
    logging_table = create_logging_status_table(status)
    print_rich_table(console, logging_table)


@click.group(invoke_without_command=True)
@click.option("--json", is_flag=True, help="Output structured JSON logs instead of rich interface")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--log-file", help="Custom log file path")
@click.pass_context
def app(ctx, json: bool, log_level: str | None, log_file: str | None):
    """
    🕸️ Graphweave - Knowledge graphs with cross-domain network effects

    Extract entities, relationships and claims from web pages, merge them per
    domain, and let independent domains corroborate each other.
    """
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = json

    # Initialize logging once here instead of in each command
    _initialize_logging(json, log_level, log_file)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


app.add_command(build)
app.add_command(merge)
app.add_command(network)
app.add_command(logging_status)


if __name__ == "__main__":
    app()
