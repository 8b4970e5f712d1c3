"""DB-API cursor flow: execute, describe, fetch, and handle errors."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "nebula_dbapi").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from nebula_dbapi import (
    NUMBER,
    InMemoryGraphSession,
    NotSupportedError,
    UnboundParameter,
    connect,
)


def build_session() -> InMemoryGraphSession:
    session = InMemoryGraphSession()
    session.add_result(
        "match (p:person) where p.age >= 18 return p.name, p.age",
        ["p.name", "p.age"],
        [("alice", 31), ("bob", 27), ("carol", 45)],
    )

    def echo(query_text: str):
        # Any `return <literal>` query echoes its literal back.
        if query_text.startswith("return "):
            return ["value"], [(query_text[len("return "):],)]
        return None

    session.add_responder(echo)
    return session


def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    conn = connect(
        url="nebula://127.0.0.1:9669/social?timezone=UTC",
        session_factory=lambda settings: build_session(),
    )
    try:
        cur = conn.cursor()
        cur.execute("match (p:person) where p.age >= ? return p.name, p.age", [18])
        print("Description before fetch:", cur.description)

        print("First row:", cur.fetchone())
        print("Age column is numeric:", cur.description[1][1] == NUMBER)

        cur.arraysize = 2
        print("Remaining rows:", cur.fetchmany())
        print("Row count:", cur.rowcount)

        cur.execute('return ?', ['who said "?"'])
        print("Echoed literal:", cur.fetchall())

        try:
            cur.execute("return ?, ?", [1])
        except UnboundParameter as exc:
            print("Missing parameter:", exc)

        try:
            conn.rollback()
        except NotSupportedError as exc:
            print("Rollback:", exc)
        cur.close()
    finally:
        conn.close()


if __name__ == "__main__":
    main()
