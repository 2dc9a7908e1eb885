"""Relational output: INSERT statements and a local SQLite database.

Records are emitted in dependency order so every foreign key points at a row
that was inserted earlier.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any, Iterator

from ..core.models import Record, Table
from ..generator.core import GeneratedDataset

logger = logging.getLogger(__name__)

Row = dict[str, Any]


def relational_records(dataset: GeneratedDataset) -> Iterator[tuple[Table, Row]]:
    """Yield ``(table, row)`` pairs in insertion order."""
    pools = dataset.pools
    batches: list[tuple[Table, list[Record]]] = [
        (Table.USER, pools.users),
        (Table.REGISTER, pools.registers),
        (Table.NAME, pools.names),
        (Table.OCCUPATION, pools.occupations),
        (Table.DIRECTOR, pools.directors),
        (Table.DIRECTOR_NAME, pools.director_names),
        (Table.CELEBRANT, pools.celebrants),
        (Table.CELEBRANT_NAME, pools.celebrant_names),
        (Table.OFFICIANT, pools.officiants),
        (Table.OFFICIANT_NAME, pools.officiant_names),
        (Table.PERSON, dataset.persons),
        (Table.PERSON_NAME, dataset.person_names),
        (Table.PERSON_OCCUPATION, dataset.person_occupations),
        (Table.MARRIAGE, dataset.marriages),
        (Table.WITNESS, dataset.witnesses),
        (Table.DEATH, dataset.deaths),
    ]
    for table, records in batches:
        for record in records:
            yield table, record.to_record()


def format_value(value: Any) -> str:
    """SQL literal for a row value."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    escaped = str(value).replace("'", "''")
    return f"'{escaped}'"


def format_insert(table: Table | str, row: Row) -> str:
    """One ``INSERT INTO "Table" (cols) VALUES (vals);`` statement."""
    name = table.value if isinstance(table, Table) else table
    columns = ", ".join(row)
    values = ", ".join(format_value(v) for v in row.values())
    return f'INSERT INTO "{name}" ({columns}) VALUES ({values});'


def write_sql_file(dataset: GeneratedDataset, path: Path | str) -> int:
    """Write every INSERT statement to ``path``, one per line.

    Returns:
        Number of statements written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with open(path, "w", encoding="utf-8") as f:
        for table, row in relational_records(dataset):
            f.write(format_insert(table, row))
            f.write("\n")
            count += 1

    logger.info("Wrote %d INSERT statements to %s", count, path)
    return count


def _column_type(values: list[Any]) -> str:
    sample = next((v for v in values if v is not None), None)
    if isinstance(sample, (bool, int)):
        return "INTEGER"
    if isinstance(sample, float):
        return "REAL"
    return "TEXT"


def save_sqlite(dataset: GeneratedDataset, path: Path | str) -> dict[str, int]:
    """Write all tables to a fresh SQLite database.

    Each table gets the union of its rows' columns; optional columns a row
    lacks are stored as NULL.

    Returns:
        Row count per table
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    # Remove existing file to start fresh
    if path.exists():
        path.unlink()

    tables: dict[str, list[Row]] = {}
    for table, row in relational_records(dataset):
        tables.setdefault(table.value, []).append(row)

    conn = sqlite3.connect(path)
    try:
        cursor = conn.cursor()
        for name, rows in tables.items():
            columns: list[str] = []
            for row in rows:
                columns.extend(c for c in row if c not in columns)

            column_defs = ", ".join(
                f'"{c}" {_column_type([r.get(c) for r in rows])}' for c in columns
            )
            cursor.execute(f'CREATE TABLE "{name}" ({column_defs})')

            placeholders = ", ".join("?" for _ in columns)
            quoted = ", ".join(f'"{c}"' for c in columns)
            cursor.executemany(
                f'INSERT INTO "{name}" ({quoted}) VALUES ({placeholders})',
                [tuple(row.get(c) for c in columns) for row in rows],
            )
        conn.commit()
    finally:
        conn.close()

    counts = {name: len(rows) for name, rows in tables.items()}
    logger.info("Saved %d tables to %s", len(counts), path)
    return counts
