"""
Tests for argspan.pipelines.shared.jsonl_processor.
"""
import pytest

from argspan.graph.core import SpanAnnotationGraph
from argspan.pipelines.shared import jsonl_processor
from argspan.schema.label import MutableSpanTextLabel, SpanTextLabel
from argspan.schema.span import Span


@pytest.fixture
def graphs():
    claim = SpanTextLabel.create(Span(begin=0, end=5), "claim", "Taxes")
    premise = SpanTextLabel.create(Span(begin=6, end=10), "premise", "hurt", {"weight": 0.5})
    return [
        ("doc-a", SpanAnnotationGraph([claim, premise], [-1, 0])),
        ("doc-b", SpanAnnotationGraph([premise], [-1])),
    ]


class TestDiscoverJsonlFiles:

    def test_directory(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "b.jsonl").write_text("")
        (tmp_path / "sub" / "a.jsonl").write_text("")
        (tmp_path / "notes.txt").write_text("")
        files = jsonl_processor.discover_jsonl_files(tmp_path)
        assert [f.name for f in files] == ["b.jsonl", "a.jsonl"]
        assert all(f.suffix == ".jsonl" for f in files)

    def test_non_recursive(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "top.jsonl").write_text("")
        (tmp_path / "sub" / "deep.jsonl").write_text("")
        files = jsonl_processor.discover_jsonl_files(tmp_path, recursive=False)
        assert [f.name for f in files] == ["top.jsonl"]

    def test_single_file(self, tmp_path):
        path = tmp_path / "one.jsonl"
        path.write_text("")
        assert jsonl_processor.discover_jsonl_files(path) == [path]

    def test_wrong_suffix(self, tmp_path):
        path = tmp_path / "one.json"
        path.write_text("")
        with pytest.raises(ValueError):
            jsonl_processor.discover_jsonl_files(path)

    def test_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            jsonl_processor.discover_jsonl_files(tmp_path / "nope")

    def test_empty_directory(self, tmp_path):
        with pytest.raises(ValueError, match="No JSONL files"):
            jsonl_processor.discover_jsonl_files(tmp_path)


class TestGraphRecords:

    def test_save_and_load(self, tmp_path, graphs):
        path = tmp_path / "out" / "graphs.jsonl"
        assert jsonl_processor.save_graph_records(path, graphs) == 2

        loaded, stats = jsonl_processor.load_graph_records(path)

        assert stats == {'total': 2, 'valid': 2, 'invalid': 0}
        assert loaded == graphs

    def test_load_as_mutable(self, tmp_path, graphs):
        path = tmp_path / "graphs.jsonl"
        jsonl_processor.save_graph_records(path, graphs)
        loaded, _ = jsonl_processor.load_graph_records(path, label_type=MutableSpanTextLabel)
        assert isinstance(loaded[0][1].get(0), MutableSpanTextLabel)

    def test_bad_lines_counted(self, tmp_path, graphs):
        path = tmp_path / "graphs.jsonl"
        jsonl_processor.save_graph_records(path, graphs[:1])
        with open(path, "a", encoding="utf-8") as f:
            f.write("\n")
            f.write("[1, 2]\n")
            f.write("not json\n")
            f.write('{"spanAnnotations": [], "relations": [-1]}\n')

        loaded, stats = jsonl_processor.load_graph_records(path)

        assert len(loaded) == 1
        assert stats == {'total': 4, 'valid': 1, 'invalid': 3}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            jsonl_processor.load_graph_records(tmp_path / "missing.jsonl")
