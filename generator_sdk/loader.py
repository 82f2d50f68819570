"""Load schema files and captured generate requests from disk."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def load_datamodel(path: Path) -> str:
    """Read a datamodel (schema.prisma) file."""
    with open(path, encoding="utf-8") as f:
        return f.read()


def load_dmmf(path: Path) -> Any:
    """Load captured generate params.

    Accepts either the bare params object or a whole generate request
    line as the host sent it.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict) and data.get("method") == "generate" and "params" in data:
        return data["params"]
    return data
