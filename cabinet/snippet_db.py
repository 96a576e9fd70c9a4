"""SQLite storage for topology snippets."""

import os
import sqlite3
from pathlib import Path

from netbuild.models.snippet import Snippet


DEFAULT_DB_PATH = Path(__file__).parent / "data" / "cabinet.db"
SNIPPET_DB_PATH = Path(os.getenv("CABINET_DB_PATH", str(DEFAULT_DB_PATH)))


def _connect() -> sqlite3.Connection:
    SNIPPET_DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(SNIPPET_DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def _row_to_snippet(row: sqlite3.Row) -> Snippet:
    return Snippet(
        id=row["id"],
        title=row["title"],
        content=row["content"],
        created_at=row["created_at"],
    )


def init_db() -> None:
    with _connect() as conn:
        conn.execute(
            """
            create table if not exists snippets (
                id integer primary key autoincrement,
                title text not null,
                content text not null,
                created_at text not null
            )
            """
        )
        conn.commit()


def insert_snippet(title: str, content: str, created_at: str) -> Snippet:
    """insert a snippet and return it with its assigned id."""
    with _connect() as conn:
        cursor = conn.execute(
            """
            insert into snippets (title, content, created_at)
            values (?, ?, ?)
            """,
            (title, content, created_at),
        )
        conn.commit()
        snippet_id = cursor.lastrowid
    return Snippet(id=snippet_id, title=title, content=content, created_at=created_at)


def get_snippet(snippet_id: int) -> Snippet | None:
    with _connect() as conn:
        row = conn.execute(
            "select id, title, content, created_at from snippets where id = ?",
            (snippet_id,),
        ).fetchone()
    if not row:
        return None
    return _row_to_snippet(row)


def list_snippets() -> list[Snippet]:
    with _connect() as conn:
        rows = conn.execute(
            "select id, title, content, created_at from snippets order by created_at desc, id desc"
        ).fetchall()
    return [_row_to_snippet(row) for row in rows]


def delete_snippet(snippet_id: int) -> None:
    with _connect() as conn:
        conn.execute("delete from snippets where id = ?", (snippet_id,))
        conn.commit()
