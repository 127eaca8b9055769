#!/usr/bin/env python3
"""
graph_logging.py

Logging for the graph pipelines: a Rich console handler for the terminal and
a plain-text log file in the output directory. Levels and the file name come
from the ``logging`` section of graph.yaml.
"""
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)-28s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Marks handlers installed by this module; other handlers are left in place
_OWNER_ATTR = "_argspan_graph_handler"


def resolve_level(level: Union[int, str]) -> int:
    """
    Accept a logging level as an int or a name such as "info".

    Raises:
        ValueError: If the name is not a logging level
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown logging level: {level!r}")
    return value


def teardown_graph_logging() -> None:
    """Close and detach the handlers installed by setup_graph_logging."""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if getattr(handler, _OWNER_ATTR, False):
            handler.close()
            root.removeHandler(handler)


def setup_graph_logging(
    out_dir: Path,
    logger_name: str = 'annotations2graph',
    log_file: str = "graph.log",
    console_level: Union[int, str] = logging.INFO,
    file_level: Union[int, str] = logging.DEBUG,
    console: Optional[Console] = None,
) -> logging.Logger:
    """
    Route all records through the root logger to the console and ``out_dir / log_file``.

    Calling it again replaces the handlers from the previous call, so a
    second pipeline run in the same process writes to its own log file.

    Args:
        out_dir: Output directory for the log file
        logger_name: Name of the pipeline logger returned
        log_file: File name of the log inside out_dir
        console_level: Threshold for the Rich console handler
        file_level: Threshold for the file handler
        console: Rich console to print to (a new one by default)

    Returns:
        The pipeline logger
    """
    console_level = resolve_level(console_level)
    file_level = resolve_level(file_level)
    out_dir.mkdir(parents=True, exist_ok=True)
    teardown_graph_logging()

    log_path = out_dir / log_file
    file_handler = logging.FileHandler(log_path, mode='w', encoding='utf-8')
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))

    console_handler = RichHandler(
        console=console or Console(),
        show_path=False,
        rich_tracebacks=True,
        markup=True
    )
    console_handler.setLevel(console_level)

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for handler in (file_handler, console_handler):
        setattr(handler, _OWNER_ATTR, True)
        root.addHandler(handler)

    logger = logging.getLogger(logger_name)
    for handler in logger.handlers[:]:
        if getattr(handler, _OWNER_ATTR, False):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True

    logger.info("=" * 80)
    logger.info(f"ARGSPAN {logger_name.upper()}")
    logger.info("=" * 80)
    logger.info(f"Started at: {datetime.now().strftime(DATE_FORMAT)}")
    logger.info(f"Log file: {log_path} (console {logging.getLevelName(console_level)}, file {logging.getLevelName(file_level)})")
    logger.info("-" * 80)

    return logger


def get_graph_logger(logger_name: str = 'annotations2graph') -> logging.Logger:
    """Pipeline logger; warnings go to a Rich console until setup_graph_logging runs."""
    logger = logging.getLogger(logger_name)
    if not logger.hasHandlers():
        handler = RichHandler(console=Console(stderr=True), show_path=False, level=logging.WARNING)
        setattr(handler, _OWNER_ATTR, True)
        logger.addHandler(handler)
    return logger
