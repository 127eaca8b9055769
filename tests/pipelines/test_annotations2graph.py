"""
Tests for the annotations2graph pipeline.
"""
import json

import pytest
import yaml

from argspan.graph.core import SpanAnnotationGraph
from argspan.graph.errors import RelationCycleError
from argspan.pipelines import annotations2graph
from argspan.schema.span import Span


ESSAY_TEXT = "Taxes should be lowered because it would boost consumption."


def write_jsonl(path, records):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for record in records:
            f.write(json.dumps(record) + "\n")
    return path


@pytest.fixture
def settings():
    return {
        "relations": {"check_acyclic": False},
        "index": {"on_collision": "first"},
        "io": {"indent": None, "ensure_ascii": False},
        "pipeline": {"skip_invalid": True},
        "logging": {"file": "graph.log", "console_level": "INFO", "file_level": "DEBUG"},
    }


class TestBuildRelationTable:

    def test_pairs_to_table(self):
        table = annotations2graph.build_relation_table([{"source": 2, "target": 0}, {"source": 0, "target": 1}], 3)
        assert table == [1, -1, 0]

    def test_no_relations(self):
        assert annotations2graph.build_relation_table([], 2) == [-1, -1]

    def test_second_outgoing_relation_rejected(self):
        with pytest.raises(ValueError, match="two outgoing relations"):
            annotations2graph.build_relation_table(
                [{"source": 0, "target": 1}, {"source": 0, "target": 2}], 3
            )

    def test_unknown_source_rejected(self):
        with pytest.raises(ValueError):
            annotations2graph.build_relation_table([{"source": 5, "target": 0}], 2)


class TestBuildDocumentGraph:

    def test_essay(self, essay_record, settings):
        graph = annotations2graph.build_document_graph(essay_record, settings)
        claim, premise = graph.get(0), graph.get(1)
        assert claim.label == "Claim"
        assert claim.covered_text == ESSAY_TEXT[0:23]
        assert claim.attributes == {"stance": "for"}
        assert premise.covered_text == "it would boost consumption."
        assert graph.relation_target_of(premise) == claim
        assert graph.relation_target_of(claim) is None
        assert dict(graph.labels_at(Span(begin=32, end=59))) == {"Premise": premise}

    def test_explicit_covered_text_wins(self, essay_record, settings):
        essay_record["annotations"][0]["text"] = "TAXES"
        graph = annotations2graph.build_document_graph(essay_record, settings)
        assert graph.get(0).covered_text == "TAXES"

    def test_cycle_allowed_by_default(self, cyclic_record, settings):
        graph = annotations2graph.build_document_graph(cyclic_record, settings)
        assert graph.relations == (1, 0)

    def test_cycle_rejected_when_checked(self, cyclic_record, settings):
        settings["relations"]["check_acyclic"] = True
        with pytest.raises(RelationCycleError):
            annotations2graph.build_document_graph(cyclic_record, settings)


class TestRun:

    def test_end_to_end(self, tmp_path, essay_record):
        indir = tmp_path / "in"
        write_jsonl(indir / "essays.jsonl", [essay_record])
        outdir = tmp_path / "out"

        stats = annotations2graph.run(indir, outdir)

        assert stats.documents == 1
        assert stats.graphs == 1
        assert stats.invalid == 0
        assert stats.nodes == 2
        assert stats.relations == 1
        assert stats.labels == {"Claim": 1, "Premise": 1}

        lines = (outdir / "graphs.jsonl").read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        record = json.loads(lines[0])
        assert record["doc_id"] == "essay01"
        assert record["relations"] == [-1, 0]
        graph = SpanAnnotationGraph.from_dict(record)
        assert len(graph) == 2

        saved_stats = json.loads((outdir / "graph_stats.json").read_text(encoding="utf-8"))
        assert saved_stats["graphs"] == 1

    def test_invalid_documents_are_skipped(self, tmp_path, essay_record):
        broken = dict(essay_record, doc_id="broken", relations=[{"source": 0, "target": 9}])
        duplicated = dict(essay_record, doc_id="dup", annotations=essay_record["annotations"] * 2, relations=[])
        path = write_jsonl(tmp_path / "in" / "essays.jsonl", [essay_record, broken, duplicated])
        with open(path, "a", encoding="utf-8") as f:
            f.write("{not json}\n")

        stats = annotations2graph.run(path, tmp_path / "out")

        assert stats.documents == 4
        assert stats.graphs == 1
        assert stats.invalid == 3

    def test_invalid_document_fails_when_not_skipping(self, tmp_path, essay_record):
        broken = dict(essay_record, relations=[{"source": 0, "target": 9}])
        indir = tmp_path / "in"
        write_jsonl(indir / "essays.jsonl", [broken])
        config = tmp_path / "graph.yaml"
        config.write_text(yaml.dump({"pipeline": {"skip_invalid": False}}), encoding="utf-8")

        with pytest.raises(ValueError):
            annotations2graph.run(indir, tmp_path / "out", config=config)

    def test_config_enables_cycle_check(self, tmp_path, essay_record, cyclic_record):
        indir = tmp_path / "in"
        write_jsonl(indir / "docs.jsonl", [essay_record, cyclic_record])
        config = tmp_path / "graph.yaml"
        config.write_text(yaml.dump({"relations": {"check_acyclic": True}}), encoding="utf-8")

        stats = annotations2graph.run(indir, tmp_path / "out", config=config)

        assert stats.graphs == 1
        assert stats.invalid == 1

    def test_missing_config(self, tmp_path, essay_record):
        indir = tmp_path / "in"
        write_jsonl(indir / "essays.jsonl", [essay_record])
        with pytest.raises(FileNotFoundError):
            annotations2graph.run(indir, tmp_path / "out", config=tmp_path / "missing.yaml")

    def test_main(self, tmp_path, essay_record):
        indir = tmp_path / "in"
        write_jsonl(indir / "essays.jsonl", [essay_record])
        outdir = tmp_path / "out"
        try:
            annotations2graph.main(["-i", str(indir), "-o", str(outdir), "--show"])
        finally:
            annotations2graph.logger = None
        assert (outdir / "graphs.jsonl").exists()
        log_text = (outdir / "graph.log").read_text(encoding="utf-8")
        assert "Built 1 graphs" in log_text

    def test_main_log_settings_from_config(self, tmp_path, essay_record):
        indir = tmp_path / "in"
        write_jsonl(indir / "essays.jsonl", [essay_record])
        outdir = tmp_path / "out"
        config = tmp_path / "graph.yaml"
        config.write_text(yaml.safe_dump({"logging": {"file": "run.log", "file_level": "WARNING"}}))
        try:
            annotations2graph.main(["-i", str(indir), "-o", str(outdir), "-c", str(config)])
        finally:
            annotations2graph.logger = None
        assert not (outdir / "graph.log").exists()
        # nothing at WARNING or above in a clean run
        assert (outdir / "run.log").read_text(encoding="utf-8") == ""


class TestParseArgs:

    def test_defaults(self, tmp_path):
        args = annotations2graph.parse_args(["-i", str(tmp_path), "-o", str(tmp_path / "out")])
        assert args.indir == tmp_path
        assert args.config is None
        assert args.show is False
