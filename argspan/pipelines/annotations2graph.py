#!/usr/bin/env python3
"""
annotations2graph.py

Recursively load all .jsonl document files under --in, convert each
document's annotations into span labels, link them with the document's
relations and emit one SpanAnnotationGraph per document to graphs.jsonl
under --out, together with graph_stats.json and the log file named in
the config (graph.log by default).

Input record format (one document per line):

    {"doc_id": "essay01",
     "text": "Taxes should be lowered because ...",
     "annotations": [{"begin": 0, "end": 23, "type": "types.Claim", "attrs": {...}}, ...],
     "relations": [{"source": 1, "target": 0}, ...]}

``source``/``target`` are positions in the ``annotations`` array. Covered text
is sliced from ``text`` unless an annotation carries its own ``text``.
"""
import argparse
import json
import logging
import time
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from argspan.annotations.factory import from_host_annotation
from argspan.config_loader import load_config_file, load_graph_config
from argspan.graph.core import SpanAnnotationGraph
from argspan.graph.display import print_graph
from argspan.graph.errors import GraphError
from argspan.graph.graph_logging import get_graph_logger, setup_graph_logging, teardown_graph_logging
from argspan.graph.validation import NO_RELATION, validate_acyclic
from argspan.pipelines.shared.jsonl_processor import discover_jsonl_files, iter_jsonl_records, save_graph_records
from argspan.schema.stats import GraphStats

# Module-level logger that gets configured in main()
logger = None


def get_logger() -> logging.Logger:
    """Get the module logger, creating a basic one if none exists."""
    global logger
    if logger is None:
        logger = get_graph_logger('annotations2graph')
    return logger


@dataclass
class JsonAnnotation:
    """Host annotation read from a JSONL document record."""
    begin: int
    end: int
    type_name: str
    covered_text: Optional[str]
    attrs: Optional[Dict[str, Any]] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any], text: Optional[str]) -> "JsonAnnotation":
        begin, end = record["begin"], record["end"]
        covered_text = record.get("text")
        if covered_text is None and text is not None:
            covered_text = text[begin:end]
        return cls(begin, end, record["type"], covered_text, record.get("attrs"))


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        prog="annotations2graph",
        description="Build span annotation graphs from annotated JSONL documents"
    )
    p.add_argument(
        "-i", "--in",
        dest="indir", type=Path, required=True,
        help="Input directory (recursively searched for *.jsonl) or a single .jsonl file"
    )
    p.add_argument(
        "-o", "--out",
        dest="outdir", type=Path, required=True,
        help="Output directory for graphs.jsonl, graph_stats.json and graph.log"
    )
    p.add_argument(
        "-c", "--config",
        dest="config", type=Path, default=None,
        help="Path to YAML settings (default: packaged config/graph.yaml)"
    )
    p.add_argument(
        "--show",
        action="store_true",
        help="Print a table for every graph built"
    )
    return p.parse_args(argv)


def load_settings(path: Optional[Path]) -> dict:
    log = get_logger()
    if path is None:
        log.info("Using packaged graph configuration")
        return load_graph_config(quiet=True)
    log.info(f"Loading graph configuration from: {path}")
    if not path.exists():
        log.error(f"Config not found: {path}")
        raise FileNotFoundError(path)
    return load_config_file(path, quiet=True)


def build_relation_table(relations: List[Dict[str, int]], node_count: int) -> List[int]:
    """
    Turn a list of {source, target} pairs into a relation table.

    Raises:
        ValueError: If a source has more than one outgoing relation
    """
    table = [NO_RELATION] * node_count
    for relation in relations:
        source, target = relation["source"], relation["target"]
        if not 0 <= source < node_count:
            raise ValueError(f"Relation source {source} is not an annotation position")
        if table[source] != NO_RELATION:
            raise ValueError(
                f"Annotation {source} has two outgoing relations ({table[source]} and {target})"
            )
        table[source] = target
    return table


def build_document_graph(record: Dict[str, Any], settings: dict) -> SpanAnnotationGraph:
    """
    Build the graph for one document record.

    Raises:
        KeyError, ValueError, ValidationError, GraphError: If the record is malformed
    """
    text = record.get("text")
    nodes = []
    for annotation_record in record.get("annotations", []):
        host_annotation = JsonAnnotation.from_record(annotation_record, text)
        annotation = from_host_annotation(host_annotation)
        nodes.append(annotation.to_label(attributes=host_annotation.attrs))

    relations = build_relation_table(record.get("relations", []), len(nodes))
    graph = SpanAnnotationGraph(nodes, relations, on_collision=settings["index"]["on_collision"])
    if settings["relations"]["check_acyclic"]:
        validate_acyclic(graph.relations)
    return graph


def build_graphs(files: List[Path], settings: dict, show: bool = False) -> Tuple[List[Tuple[Optional[str], SpanAnnotationGraph]], GraphStats]:
    log = get_logger()
    log.info("=" * 50)
    log.info("STAGE 1: GRAPH CONSTRUCTION")
    log.info("=" * 50)

    graphs = []
    stats = GraphStats()
    label_counts = Counter()
    skip_invalid = settings["pipeline"]["skip_invalid"]

    for f in files:
        log.info(f"Processing file: {f}")
        read_stats = {'total': 0, 'invalid': 0}
        for line_num, record in iter_jsonl_records(f, read_stats):
            doc_id = record.get("doc_id") or f"{f.stem}:{line_num}"
            try:
                graph = build_document_graph(record, settings)
            except (KeyError, TypeError, ValueError, ValidationError, GraphError) as e:
                if not skip_invalid:
                    log.error(f"{doc_id}: {e}")
                    raise
                log.warning(f"Skipping {doc_id}: {e}")
                stats.invalid += 1
                continue

            graphs.append((doc_id, graph))
            label_counts.update(node.label for node in graph)
            stats.nodes += len(graph)
            stats.relations += graph.relation_count
            log.debug(f"{doc_id}: {len(graph)} nodes, {graph.relation_count} relations")
            if show:
                print_graph(graph, title=doc_id)

        stats.documents += read_stats['total']
        stats.invalid += read_stats['invalid']

    stats.graphs = len(graphs)
    stats.labels = dict(label_counts.most_common())

    log.info("-" * 50)
    log.info("GRAPH CONSTRUCTION SUMMARY:")
    log.info(f"  Documents read: {stats.documents}")
    log.info(f"  Graphs built: {stats.graphs}")
    log.info(f"  Invalid documents: {stats.invalid}")
    log.info(f"  Total nodes: {stats.nodes}")
    log.info(f"  Total relations: {stats.relations}")
    for label, count in label_counts.most_common(10):
        log.info(f"    {label:<20} {count:,}")
    log.info("-" * 50)

    return graphs, stats


def save_outputs(out: Path, graphs, stats: GraphStats, settings: dict) -> None:
    log = get_logger()
    log.info("=" * 50)
    log.info("STAGE 2: SERIALIZATION")
    log.info("=" * 50)

    save_graph_records(out / "graphs.jsonl", graphs, ensure_ascii=settings["io"]["ensure_ascii"])

    stats_path = out / "graph_stats.json"
    with open(stats_path, "w", encoding="utf-8") as f:
        json.dump(
            stats.model_dump(), f,
            indent=settings["io"]["indent"], ensure_ascii=settings["io"]["ensure_ascii"]
        )
    log.info(f"Saved statistics to: {stats_path}")


def run(
    indir: Path,
    outdir: Path,
    config: Optional[Path] = None,
    show: bool = False,
    settings: Optional[dict] = None,
) -> GraphStats:
    if settings is None:
        settings = load_settings(config)
    outdir.mkdir(parents=True, exist_ok=True)

    files = discover_jsonl_files(indir)
    graphs, stats = build_graphs(files, settings, show=show)
    save_outputs(outdir, graphs, stats, settings)
    return stats


def main(argv=None):
    args = parse_args(argv)
    settings = load_settings(args.config)
    log_settings = settings["logging"]

    global logger
    logger = setup_graph_logging(
        args.outdir, 'annotations2graph',
        log_file=log_settings["file"],
        console_level=log_settings["console_level"],
        file_level=log_settings["file_level"],
    )

    logger.info("COMMAND LINE ARGUMENTS:")
    logger.info(f"  Input: {args.indir}")
    logger.info(f"  Output directory: {args.outdir}")
    logger.info(f"  Config file: {args.config or 'packaged graph.yaml'}")
    logger.info("-" * 80)

    start_time = time.time()
    try:
        stats = run(args.indir, args.outdir, show=args.show, settings=settings)
        logger.info(f"[bold green]✅ Built {stats.graphs} graphs → {args.outdir / 'graphs.jsonl'}[/bold green]")
    finally:
        elapsed = time.time() - start_time
        log_path = args.outdir / log_settings["file"]
        logger.info("=" * 80)
        logger.info(f"Pipeline finished at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        logger.info(f"Total execution time: {elapsed:.2f} seconds")
        logger.info("=" * 80)
        logger.info(f"[green]📋 Detailed logs available at: {log_path}[/green]")
        teardown_graph_logging()


if __name__ == "__main__":
    main()
