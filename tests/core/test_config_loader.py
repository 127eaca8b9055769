"""
Test suite for argspan.config_loader.

Covers:
- Packaged config loading and caching
- Explicit config files merged over defaults
- Error handling for missing files
"""

import pytest
import yaml
from unittest.mock import patch

from argspan.config_loader import DEFAULT_CONFIG, load_config_file, load_graph_config


class TestConfigLoader:

    def test_packaged_config(self):
        cfg = load_graph_config(quiet=True)
        assert cfg["relations"]["check_acyclic"] is False
        assert cfg["index"]["on_collision"] == "first"
        assert cfg["io"]["ensure_ascii"] is False
        assert cfg["pipeline"]["skip_invalid"] is True

    def test_packaged_config_is_cached(self):
        assert load_graph_config(quiet=True) is load_graph_config(quiet=True)

    def test_missing_packaged_config(self):
        with patch("argspan.config_loader.c"):
            with pytest.raises(FileNotFoundError, match="Missing graph config"):
                load_graph_config("nonexistent.yaml", quiet=True)

    def test_explicit_file_merges_defaults(self, tmp_path):
        path = tmp_path / "graph.yaml"
        path.write_text(yaml.dump({"relations": {"check_acyclic": True}}), encoding="utf-8")
        cfg = load_config_file(path, quiet=True)
        assert cfg["relations"]["check_acyclic"] is True
        assert cfg["index"] == DEFAULT_CONFIG["index"]

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config_file(path, quiet=True) == DEFAULT_CONFIG

    def test_defaults_not_mutated(self, tmp_path):
        path = tmp_path / "graph.yaml"
        path.write_text(yaml.dump({"io": {"indent": 4}}), encoding="utf-8")
        load_config_file(path, quiet=True)
        assert DEFAULT_CONFIG["io"]["indent"] is None

    def test_table_shown_unless_quiet(self, tmp_path):
        path = tmp_path / "graph.yaml"
        path.write_text("", encoding="utf-8")
        with patch("argspan.config_loader.c") as mock_console:
            load_config_file(path, quiet=False)
            mock_console.print.assert_called_once()
