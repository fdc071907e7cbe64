from __future__ import annotations
import tomllib
from pathlib import Path
from typing import Any, Dict


class MissingMetaSectionError(LookupError):
    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Missing [meta] section in {path.name}")


def load_metadata(path: str | Path) -> Dict[str, Any]:
    """Read the TOML file at `path` and return its top-level [meta] table."""
    p = Path(path)
    with p.open("rb") as f:
        doc = tomllib.load(f)
    meta = doc.get("meta")
    if not isinstance(meta, dict):
        raise MissingMetaSectionError(p)
    return meta
