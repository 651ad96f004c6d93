"""Database connection utilities for Anki collection files."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path

from unidecode import unidecode


def unicase_compare(x, y):
    """Custom collation function for unicase comparison."""
    x_ = unidecode(x).lower()
    y_ = unidecode(y).lower()
    return 1 if x_ > y_ else -1 if x_ < y_ else 0


@contextmanager
def setup_anki_connection(anki_db_path: Path):
    """Open a collection file with Anki's ``unicase`` collation registered."""
    conn = sqlite3.connect(str(anki_db_path))
    conn.row_factory = sqlite3.Row
    conn.create_collation("unicase", unicase_compare)
    try:
        yield conn
    finally:
        conn.close()
