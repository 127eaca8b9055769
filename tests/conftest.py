import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from argspan.graph.core import SpanAnnotationGraph
from argspan.schema.label import SpanTextLabel
from argspan.schema.span import Span

DOCUMENT_TEXT = "Taxes hurt growth; cut them."


@pytest.fixture
def claim():
    return SpanTextLabel.create(Span(begin=0, end=5), "claim", covered_text="Taxes")


@pytest.fixture
def evidence():
    return SpanTextLabel.create(Span(begin=6, end=10), "evidence", covered_text="hurt")


@pytest.fixture
def stance():
    """Second label dimension over the claim's span."""
    return SpanTextLabel.create(Span(begin=0, end=5), "stance", covered_text="Taxes", attributes={"polarity": "con"})


@pytest.fixture
def scenario_graph(claim, evidence):
    """claim -> evidence, evidence -> nothing."""
    return SpanAnnotationGraph([claim, evidence], [1, -1])
