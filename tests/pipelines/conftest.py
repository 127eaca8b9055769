"""
Pytest configuration for pipeline tests.
"""
import pytest

ESSAY_TEXT = "Taxes should be lowered because it would boost consumption."


@pytest.fixture
def essay_record():
    """Premise [32, 59) supports claim [0, 23)."""
    return {
        "doc_id": "essay01",
        "text": ESSAY_TEXT,
        "annotations": [
            {"begin": 0, "end": 23, "type": "types.Claim", "attrs": {"stance": "for"}},
            {"begin": 32, "end": 59, "type": "types.Premise"},
        ],
        "relations": [{"source": 1, "target": 0}],
    }


@pytest.fixture
def cyclic_record():
    return {
        "doc_id": "cyclic",
        "text": "ab",
        "annotations": [
            {"begin": 0, "end": 1, "type": "Claim"},
            {"begin": 1, "end": 2, "type": "Claim"},
        ],
        "relations": [{"source": 0, "target": 1}, {"source": 1, "target": 0}],
    }
