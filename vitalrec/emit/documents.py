"""Document output: marriage and death collections as JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..projection.indexes import index_catalog

logger = logging.getLogger(__name__)

MARRIAGES_FILE = "marriages.json"
DEATHS_FILE = "deaths.json"
INDEXES_FILE = "indexes.json"


def save_json(data: Any, path: Path | str) -> None:
    """Save ``data`` as pretty-printed UTF-8 JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=str)


def save_documents(
    marriages: list[dict[str, Any]],
    deaths: list[dict[str, Any]],
    output_dir: Path | str,
    create_indexes: bool = True,
) -> list[Path]:
    """Write both collections, plus the index catalog when requested.

    Returns:
        Paths of the files written
    """
    output_dir = Path(output_dir)
    written = []

    for filename, documents in ((MARRIAGES_FILE, marriages), (DEATHS_FILE, deaths)):
        path = output_dir / filename
        save_json(documents, path)
        written.append(path)
        logger.info("Wrote %d documents to %s", len(documents), path)

    if create_indexes:
        path = output_dir / INDEXES_FILE
        save_json(index_catalog(), path)
        written.append(path)

    return written
