"""
Shared JSONL processing utilities for argspan pipelines.

Key Functions:
- discover_jsonl_files: Find JSONL files recursively in directories
- iter_jsonl_records: Stream decoded JSON objects with line numbers
- load_graph_records: Load serialized SpanAnnotationGraph lines
- save_graph_records: Write graphs one per line
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Type

from pydantic import ValidationError

from argspan.graph.core import SpanAnnotationGraph
from argspan.graph.errors import GraphError
from argspan.schema.label import BaseSpanTextLabel, SpanTextLabel

logger = logging.getLogger(__name__)


def discover_jsonl_files(input_path: Path, recursive: bool = True) -> List[Path]:
    """
    Discover JSONL files in a directory or return single file if path is a file.

    Args:
        input_path: Path to directory or single JSONL file
        recursive: Whether to search recursively in subdirectories

    Returns:
        Sorted list of JSONL file paths

    Raises:
        FileNotFoundError: If path doesn't exist
        ValueError: If the path is not a JSONL file or holds none
    """
    if not input_path.exists():
        raise FileNotFoundError(f"Path does not exist: {input_path}")

    if input_path.is_file():
        if input_path.suffix.lower() == '.jsonl':
            return [input_path]
        raise ValueError(f"File is not a JSONL file: {input_path}")

    if recursive:
        files = list(input_path.rglob("*.jsonl"))
    else:
        files = list(input_path.glob("*.jsonl"))

    if not files:
        raise ValueError(f"No JSONL files found in: {input_path}")

    logger.info(f"Discovered {len(files)} JSONL files in {input_path}")
    return sorted(files)


def iter_jsonl_records(file_path: Path, stats: Optional[Dict[str, int]] = None) -> Iterator[Tuple[int, dict]]:
    """
    Yield (line_number, record) for each JSON object in a JSONL file.

    Blank lines are skipped; lines that are not JSON objects are counted
    under stats['invalid'] and skipped.
    """
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    with open(file_path, 'r', encoding='utf-8') as f:
        for line_num, line in enumerate(f, 1):
            if not line.strip():
                continue
            if stats is not None:
                stats['total'] += 1
            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                logger.debug(f"Line {line_num}: JSON decode error: {e}")
                if stats is not None:
                    stats['invalid'] += 1
                continue
            if not isinstance(record, dict):
                logger.debug(f"Line {line_num}: expected a JSON object, got {type(record).__name__}")
                if stats is not None:
                    stats['invalid'] += 1
                continue
            yield line_num, record


def load_graph_records(
    file_path: Path,
    label_type: Type[BaseSpanTextLabel] = SpanTextLabel,
) -> Tuple[List[Tuple[Optional[str], SpanAnnotationGraph]], Dict[str, int]]:
    """
    Load graphs written by save_graph_records.

    Returns:
        Tuple of ([(doc_id, graph), ...], statistics)
    """
    graphs = []
    stats = {'total': 0, 'valid': 0, 'invalid': 0}

    logger.info(f"Loading span annotation graphs from: {file_path}")

    for line_num, record in iter_jsonl_records(file_path, stats):
        try:
            graph = SpanAnnotationGraph.from_dict(record, label_type=label_type)
        except (ValidationError, GraphError) as e:
            logger.debug(f"Line {line_num}: graph rejected: {e}")
            stats['invalid'] += 1
            continue
        graphs.append((record.get("doc_id"), graph))
        stats['valid'] += 1

    logger.info(f"Loaded {stats['valid']} graphs from {stats['total']} records")
    if stats['invalid'] > 0:
        logger.warning(f"Failed to load {stats['invalid']} invalid records")

    return graphs, stats


def save_graph_records(
    file_path: Path,
    graphs: Iterable[Tuple[Optional[str], SpanAnnotationGraph]],
    ensure_ascii: bool = False,
) -> int:
    """Write one graph per line; returns the number of graphs written."""
    file_path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with open(file_path, 'w', encoding='utf-8') as f:
        for doc_id, graph in graphs:
            f.write(graph.to_json(ensure_ascii=ensure_ascii, doc_id=doc_id) + "\n")
            count += 1
    logger.info(f"Saved {count} graphs to {file_path}")
    return count
