"""
Shared pipeline components for reuse across different pipelines.
"""

from . import jsonl_processor

__all__ = [
    "jsonl_processor"
]
