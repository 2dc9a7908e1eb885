"""Denormalized document projection and the document index catalog."""

from .documents import (
    Document,
    RecordIndex,
    project_death,
    project_documents,
    project_marriage,
)
from .indexes import (
    DEATH_INDEX_PATHS,
    MARRIAGE_INDEX_PATHS,
    index_catalog,
    index_models,
)

__all__ = [
    "Document",
    "RecordIndex",
    "project_death",
    "project_documents",
    "project_marriage",
    "DEATH_INDEX_PATHS",
    "MARRIAGE_INDEX_PATHS",
    "index_catalog",
    "index_models",
]
