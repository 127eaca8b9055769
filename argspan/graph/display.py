from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from argspan.graph.core import SpanAnnotationGraph
from argspan.graph.validation import NO_RELATION

console = Console()


def _shorten(text: Optional[str], width: int) -> str:
    if text is None:
        return "—"
    text = text.replace("\n", "⏎")
    return text if len(text) <= width else text[: width - 1] + "…"


def render_graph_table(graph: SpanAnnotationGraph, title: str = "Span Annotation Graph", text_width: int = 40) -> Table:
    """Build a table with one row per node: id, span, label, covered text and relation target."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Id", justify="right", style="dim")
    table.add_column("Span", style="cyan")
    table.add_column("Label", style="bold")
    table.add_column("Text")
    table.add_column("→ Target", justify="right", style="green")

    for node_id, node in enumerate(graph):
        target_id = graph.relations[node_id]
        table.add_row(
            str(node_id),
            f"[{node.span.begin}, {node.span.end})",
            escape(node.label),
            escape(_shorten(node.covered_text, text_width)),
            "—" if target_id == NO_RELATION else str(target_id),
        )
    return table


def print_graph(graph: SpanAnnotationGraph, title: str = "Span Annotation Graph") -> None:
    console.print(render_graph_table(graph, title=title))
