"""Loading of the static input corpora.

The bundled corpus lives in ``data/corpora.yaml``. A custom YAML file with
the same keys can replace it wholesale; every list must be non-empty.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..core.errors import InvalidArgument

_DATA_DIR = Path(__file__).parent / "data"
DEFAULT_CORPORA_PATH = _DATA_DIR / "corpora.yaml"


class Corpora(BaseModel):
    """Read-only lists the generator indexes by position."""

    names_men: list[str] = Field(min_length=1)
    names_women: list[str] = Field(min_length=1)
    surnames_men: list[str] = Field(min_length=1)
    surnames_women: list[str] = Field(min_length=1)
    villages: list[str] = Field(min_length=1)
    occupations: list[str] = Field(min_length=1)
    director_titles: list[str] = Field(min_length=1)
    celebrant_titles: list[str] = Field(min_length=1)
    officiant_titles: list[str] = Field(min_length=1)
    death_causes: list[str] = Field(min_length=1)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "Corpora":
        """Load corpora from a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            InvalidArgument: If a list is missing or empty.
        """
        path = Path(path)

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        try:
            return cls.model_validate(data or {})
        except ValidationError as e:
            raise InvalidArgument(f"Invalid corpora file {path}: {e}") from e


@lru_cache(maxsize=1)
def _bundled_corpora() -> Corpora:
    return Corpora.from_yaml(DEFAULT_CORPORA_PATH)


def load_corpora(path: Path | str | None = None) -> Corpora:
    """Load a corpus file, or the bundled corpus when no path is given."""
    if not path:
        return _bundled_corpora()
    return Corpora.from_yaml(path)
