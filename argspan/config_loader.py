from pathlib import Path
from functools import lru_cache
from typing import Optional

import yaml
from rich.console import Console
from rich.table import Table

c = Console()

DEFAULT_CONFIG = {
	"relations": {"check_acyclic": False},
	"index": {"on_collision": "first"},
	"io": {"indent": None, "ensure_ascii": False},
	"pipeline": {"skip_invalid": True},
	"logging": {"file": "graph.log", "console_level": "INFO", "file_level": "DEBUG"},
}


def _merge_defaults(cfg: Optional[dict]) -> dict:
	merged = {section: dict(values) for section, values in DEFAULT_CONFIG.items()}
	for section, values in (cfg or {}).items():
		if isinstance(values, dict):
			merged.setdefault(section, {}).update(values)
		else:
			merged[section] = values
	return merged


def _show_config(cfg: dict, source: Path) -> None:
	tbl = Table(show_header=True, header_style="bold magenta", title=str(source))
	tbl.add_column("Field", style="dim")
	tbl.add_column("Value")

	tbl.add_row("Check Acyclic", str(cfg["relations"]["check_acyclic"]))
	tbl.add_row("Index Collision Policy", str(cfg["index"]["on_collision"]))
	tbl.add_row("JSON Indent", str(cfg["io"]["indent"]))
	tbl.add_row("Ensure ASCII", str(cfg["io"]["ensure_ascii"]))
	tbl.add_row("Skip Invalid Documents", str(cfg["pipeline"]["skip_invalid"]))
	tbl.add_row("Log File", str(cfg["logging"]["file"]))
	tbl.add_row("Console / File Level", f"{cfg['logging']['console_level']} / {cfg['logging']['file_level']}")

	c.print(tbl)


def load_config_file(path: Path, quiet: bool = False) -> dict:
	"""
	Load a graph configuration from an explicit YAML path.

	Missing keys fall back to DEFAULT_CONFIG.
	"""
	if not path.exists():
		c.print(f"[red]❌ Missing config file:[/] {path}")
		raise FileNotFoundError(f"Missing graph config: {path}")

	with path.open("r", encoding="utf-8") as f:
		cfg = _merge_defaults(yaml.safe_load(f))

	if not quiet:
		_show_config(cfg, path)
	return cfg


@lru_cache(maxsize=4)
def load_graph_config(name: str = "graph.yaml", quiet: bool = False) -> dict:
	"""
	Load a configuration file shipped in the package's config directory.
	Cached, so repeated calls return the same dict.

	Args:
		name: The name of the config file to load.
		quiet: If True, suppresses printing the config table.
	"""
	p = Path(__file__).parent / "config" / name

	if not quiet:
		c.rule("[bold cyan]Loading Graph Config")
		c.print(f"[green]✔ Found:[/] [cyan]{p}[/cyan] — loading...")

	return load_config_file(p, quiet=quiet)
