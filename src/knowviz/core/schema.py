"""Anki collection schema, keyed by schema version.

Anki's reader picks its parser from ``col.ver``, so a layout change must come
with a new version key and matching JSON blobs in ``col``.
"""

SCHEMA_VERSION = 11

SCHEMA_LAYOUTS: dict[int, dict[str, tuple[tuple[str, str], ...]]] = {
    11: {
        "col": (
            ("id", "integer primary key"),
            ("crt", "integer not null"),
            ("mod", "integer not null"),
            ("scm", "integer not null"),
            ("ver", "integer not null"),
            ("dty", "integer not null"),
            ("usn", "integer not null"),
            ("ls", "integer not null"),
            ("conf", "text not null"),
            ("models", "text not null"),
            ("decks", "text not null"),
            ("dconf", "text not null"),
            ("tags", "text not null"),
        ),
        "notes": (
            ("id", "integer primary key"),
            ("guid", "text not null"),
            ("mid", "integer not null"),
            ("mod", "integer not null"),
            ("usn", "integer not null"),
            ("tags", "text not null"),
            ("flds", "text not null"),
            ("sfld", "integer not null"),
            ("csum", "integer not null"),
            ("flags", "integer not null"),
            ("data", "text not null"),
        ),
        "cards": (
            ("id", "integer primary key"),
            ("nid", "integer not null"),
            ("did", "integer not null"),
            ("ord", "integer not null"),
            ("mod", "integer not null"),
            ("usn", "integer not null"),
            ("type", "integer not null"),
            ("queue", "integer not null"),
            ("due", "integer not null"),
            ("ivl", "integer not null"),
            ("factor", "integer not null"),
            ("reps", "integer not null"),
            ("lapses", "integer not null"),
            ("left", "integer not null"),
            ("odue", "integer not null"),
            ("odid", "integer not null"),
            ("flags", "integer not null"),
            ("data", "text not null"),
        ),
        "revlog": (
            ("id", "integer primary key"),
            ("cid", "integer not null"),
            ("usn", "integer not null"),
            ("ease", "integer not null"),
            ("ivl", "integer not null"),
            ("lastIvl", "integer not null"),
            ("factor", "integer not null"),
            ("time", "integer not null"),
            ("type", "integer not null"),
        ),
        "graves": (
            ("usn", "integer not null"),
            ("oid", "integer not null"),
            ("type", "integer not null"),
        ),
    },
}

SCHEMA_INDEXES: dict[int, tuple[tuple[str, str, tuple[str, ...]], ...]] = {
    11: (
        ("ix_notes_usn", "notes", ("usn",)),
        ("ix_cards_usn", "cards", ("usn",)),
        ("ix_revlog_usn", "revlog", ("usn",)),
        ("ix_cards_nid", "cards", ("nid",)),
        ("ix_cards_sched", "cards", ("did", "queue", "due")),
        ("ix_revlog_cid", "revlog", ("cid",)),
        ("ix_notes_csum", "notes", ("csum",)),
    ),
}

TABLES = SCHEMA_LAYOUTS[SCHEMA_VERSION]


def column_names(table: str, version: int = SCHEMA_VERSION) -> tuple[str, ...]:
    """Column names of ``table`` in insertion order."""
    return tuple(name for name, _ in SCHEMA_LAYOUTS[version][table])


def create_table_sql(table: str, version: int = SCHEMA_VERSION) -> str:
    columns = ",\n    ".join(f"{name} {decl}" for name, decl in SCHEMA_LAYOUTS[version][table])
    return f"CREATE TABLE {table} (\n    {columns}\n)"


def create_index_sql(version: int = SCHEMA_VERSION) -> list[str]:
    return [
        f"CREATE INDEX {name} ON {table} ({', '.join(columns)})"
        for name, table, columns in SCHEMA_INDEXES[version]
    ]


def insert_sql(table: str, version: int = SCHEMA_VERSION) -> str:
    """Positional INSERT statement covering every column of ``table``."""
    placeholders = ", ".join("?" for _ in SCHEMA_LAYOUTS[version][table])
    return f"INSERT INTO {table} VALUES ({placeholders})"
