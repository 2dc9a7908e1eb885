"""Output emitters: SQL INSERT statements, SQLite and JSON documents."""

from .documents import save_documents, save_json
from .sql import (
    format_insert,
    format_value,
    relational_records,
    save_sqlite,
    write_sql_file,
)

__all__ = [
    "save_documents",
    "save_json",
    "format_insert",
    "format_value",
    "relational_records",
    "save_sqlite",
    "write_sql_file",
]
