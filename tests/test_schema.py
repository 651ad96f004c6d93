"""Pin the Anki collection layout to its schema version.

If this test fails, a column was added, removed or reordered. Anki chooses
its reader from ``col.ver``, so such a change needs a new schema version.
"""

from knowviz.core.schema import (
    SCHEMA_LAYOUTS,
    SCHEMA_VERSION,
    column_names,
    create_index_sql,
    create_table_sql,
    insert_sql,
)

VERSION_11_COLUMNS = {
    "col": (
        "id", "crt", "mod", "scm", "ver", "dty", "usn", "ls",
        "conf", "models", "decks", "dconf", "tags",
    ),
    "notes": (
        "id", "guid", "mid", "mod", "usn", "tags", "flds", "sfld", "csum", "flags", "data",
    ),
    "cards": (
        "id", "nid", "did", "ord", "mod", "usn", "type", "queue", "due",
        "ivl", "factor", "reps", "lapses", "left", "odue", "odid", "flags", "data",
    ),
    "revlog": ("id", "cid", "usn", "ease", "ivl", "lastIvl", "factor", "time", "type"),
    "graves": ("usn", "oid", "type"),
}


def test_schema_version_is_11():
    assert SCHEMA_VERSION == 11


def test_version_11_layout_is_pinned():
    assert list(SCHEMA_LAYOUTS[11]) == list(VERSION_11_COLUMNS)
    for table, columns in VERSION_11_COLUMNS.items():
        assert column_names(table, 11) == columns, f"{table} layout changed"


def test_current_layout_matches_its_version():
    if SCHEMA_VERSION == 11:
        for table, columns in VERSION_11_COLUMNS.items():
            assert column_names(table) == columns


def test_create_table_sql():
    sql = create_table_sql("graves")

    assert sql.startswith("CREATE TABLE graves (")
    assert "usn integer not null" in sql
    assert sql.index("usn") < sql.index("oid") < sql.index("type")


def test_insert_sql_has_one_placeholder_per_column():
    assert insert_sql("notes").count("?") == len(VERSION_11_COLUMNS["notes"])
    assert insert_sql("cards").count("?") == len(VERSION_11_COLUMNS["cards"])


def test_index_statements():
    statements = create_index_sql()

    assert "CREATE INDEX ix_cards_sched ON cards (did, queue, due)" in statements
    assert len(statements) == 7
