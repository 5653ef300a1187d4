# ABOUTME: Rich table builders for graph summaries, entities and network effects
# ABOUTME: Pre-configured styled tables used by the CLI commands

from typing import Any

from rich.box import ROUNDED, SIMPLE
from rich.console import Console
from rich.table import Table

from graphweave.core.models import GlobalEntity, KnowledgeGraph, NetworkEffect, NetworkEffectsAnalysis


def create_key_value_table(
    title: str,
    data: dict[str, str],
    title_style: str = "bold cyan",
    key_style: str = "bold blue",
    value_style: str = "green",
    box_style=ROUNDED,
) -> Table:
    """Create a two-column field/value table.

    Args:
        title: Table title with emoji/styling
        data: Dictionary of key-value pairs to display
        title_style: Style for the table title
        key_style: Style for the key column
        value_style: Style for the value column
        box_style: Border style for the table

    Returns:
        Formatted Rich table ready for printing
    """
    table = Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        box=box_style,
        show_header=True,
        header_style="bold magenta",
        border_style="cyan",
        title_justify="left",
        expand=False,
    )

    table.add_column("Field", style=key_style, no_wrap=False)
    table.add_column("Value", style=value_style, no_wrap=False)

    for key, value in data.items():
        table.add_row(key, str(value))

    return table


def create_multi_column_table(
    title: str,
    columns: list[tuple[str, str]],
    rows: list[list[str]],
    title_style: str = "bold cyan",
    header_style: str = "bold magenta",
    alternate_row_styles: list[str] | None = None,
    box_style=ROUNDED,
) -> Table:
    """Create a multi-column table with zebra striping.

    Args:
        title: Table title with emoji/styling
        columns: List of (column_name, column_style) tuples
        rows: List of row data
        title_style: Style for the table title
        header_style: Style for column headers
        alternate_row_styles: Alternating row styles for zebra striping
        box_style: Border style for the table

    Returns:
        Formatted Rich table ready for printing
    """
    table = Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        box=box_style,
        show_header=True,
        header_style=header_style,
        border_style="cyan",
        title_justify="left",
        row_styles=alternate_row_styles or ["", "dim"],
        expand=True,
    )

    for name, style in columns:
        table.add_column(name, style=style)

    for row in rows:
        table.add_row(*row)

    return table


def _styled_confidence(value: float) -> str:
    percentage = f"{value:.0%}"
    if value >= 0.8:
        return f"[bold green]{percentage}[/bold green]"
    if value >= 0.6:
        return f"[bold yellow]{percentage}[/bold yellow]"
    return f"[bold red]{percentage}[/bold red]"


def _truncate(text: str, length: int) -> str:
    return text[:length] + "..." if len(text) > length else text


def create_graph_summary_table(graph: KnowledgeGraph, quality_score: int | None = None) -> Table:
    """Create a summary table for one knowledge graph.

    Args:
        graph: Graph to summarize
        quality_score: Precomputed quality score, shown when given

    Returns:
        Key-value table of graph metadata
    """
    summary_data = {
        "🌐 Domain": graph.domain,
        "🆔 Graph ID": graph.id,
        "🏷️ Version": graph.metadata.version,
        "🧩 Entities": str(graph.metadata.entity_count),
        "🔗 Relationships": str(graph.metadata.relationship_count),
        "📜 Claims": str(graph.metadata.claim_count),
        "📄 Sources": ", ".join(graph.metadata.source_urls) or "None",
        "📅 Updated": graph.metadata.updated_at.strftime("%Y-%m-%d %H:%M:%S"),
    }
    if quality_score is not None:
        summary_data["🎯 Quality"] = f"{quality_score}/100"

    return create_key_value_table(
        title="🕸️ Knowledge Graph",
        data=summary_data,
        title_style="bold green",
        key_style="cyan",
        value_style="white",
    )


def create_entities_table(graph: KnowledgeGraph, limit: int = 25) -> Table:
    """Create a table listing a graph's entities, highest confidence first."""
    columns = [
        ("Type", "magenta"),
        ("Name", "bold white"),
        ("Confidence", "white"),
        ("Network", "blue"),
        ("Context", "dim white"),
    ]

    rows = []
    for entity in sorted(graph.entities, key=lambda e: e.confidence, reverse=True)[:limit]:
        network = f"✅ {entity.network.cross_domain_references} domains" if entity.network else ""
        rows.append(
            [
                entity.type.value,
                entity.name,
                _styled_confidence(entity.confidence),
                network,
                _truncate(entity.source_context or "", 60),
            ]
        )

    return create_multi_column_table(title=f"🧩 Entities for {graph.domain}", columns=columns, rows=rows)


def create_network_effects_table(effects: list[NetworkEffect]) -> Table:
    """Create a table of emitted network effects."""
    columns = [
        ("Effect", "magenta"),
        ("Domains", "cyan"),
        ("Entities", "white"),
        ("Confidence +", "green"),
        ("Authority +", "yellow"),
        ("Lift", "blue"),
    ]

    rows = [
        [
            effect.effect_type.value,
            ", ".join(effect.contributing_domains),
            str(len(effect.affected_entities)),
            f"{effect.confidence_boost:.2f}",
            f"{effect.authority_boost:.0f}",
            f"{effect.citation_probability_lift:.0f}%",
        ]
        for effect in effects
    ]

    return create_multi_column_table(title="⚡ Network Effects", columns=columns, rows=rows)


def create_global_entities_table(entities: list[GlobalEntity]) -> Table:
    """Create a table of global entities ranked by authority."""
    columns = [
        ("Name", "bold white"),
        ("Type", "magenta"),
        ("Domains", "cyan"),
        ("Confidence", "white"),
        ("Authority", "yellow"),
        ("Citations", "blue"),
    ]

    rows = [
        [
            entity.canonical_name,
            entity.entity_type.value,
            ", ".join(entity.referenced_by_domains),
            _styled_confidence(entity.confidence_score),
            f"{entity.authority_score:.0f}",
            str(entity.total_citations),
        ]
        for entity in entities
    ]

    return create_multi_column_table(title="🌍 Global Entities", columns=columns, rows=rows)


def create_network_analysis_table(analysis: NetworkEffectsAnalysis) -> Table:
    """Create a summary table of the network effects analysis."""
    analysis_data = {
        "🌍 Global Entities": str(analysis.total_global_entities),
        "🤝 Cross-Domain Entities": str(analysis.total_cross_domain_entities),
        "🕸️ Network Density": f"{analysis.network_density:.3f}",
        "🏛️ Total Authority": f"{analysis.total_authority_generated:.0f}",
        "📈 Avg Confidence Boost": f"{analysis.avg_confidence_boost:.2f}",
        "🚀 Citation Lift": f"{analysis.total_citation_lift:.0f}%",
        "✅ Validation Rate": f"{analysis.validation_rate:.1f}%",
    }

    return create_key_value_table(
        title="📊 Network Analysis",
        data=analysis_data,
        title_style="bold cyan",
        key_style="blue",
        value_style="white",
        box_style=SIMPLE,
    )


def create_logging_status_table(status: dict[str, Any]) -> Table:
    """Create a logging configuration status table.

    Args:
        status: Logging status dictionary

    Returns:
        Styled logging configuration table
    """
    logging_data = {
        "🔧 Mode": status["mode"].title(),
        "📁 Log Directory": status["log_directory"] or "N/A (production mode)",
        "🔇 Suppressed Libraries": ", ".join(status["third_party_suppressed"]),
    }

    if status["log_files"]["main"]:
        logging_data["📝 Main Log"] = status["log_files"]["main"]
    if status["log_files"]["json"]:
        logging_data["📊 JSON Log"] = status["log_files"]["json"]
    if status["log_files"]["errors"]:
        logging_data["🚨 Error Log"] = status["log_files"]["errors"]

    return create_key_value_table(
        title="🔍 Logging Configuration",
        data=logging_data,
        title_style="bold green",
        key_style="blue",
        value_style="white",
    )


def print_rich_table(console: Console, table: Table) -> None:
    """Print a rich table with consistent spacing and style.

    Args:
        console: Rich console instance
        table: Configured table to print
    """
    console.print()
    console.print(table)
    console.print()
