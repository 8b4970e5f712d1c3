"""Prepared query flow: bind `?` parameters and read typed columns."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "nebula_dbapi").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from nebula_dbapi import InMemoryGraphSession, TypeCoercionError, TypedValue, connect


def main() -> None:
    # Canned backend: results are keyed by the rendered query text.
    session = InMemoryGraphSession()
    session.add_result(
        'match (v:player) where v.age > 30 and v.team == "Lakers" return v.name, v.born limit 2',
        ["v.name", "v.born"],
        [("LeBron James", date(1984, 12, 30)), ("Anthony Davis", None)],
    )

    with connect(session, graph="basketball") as conn:
        print("Session commands:", session.executed)

        statement = conn.prepare(
            "match (v:player) where v.age > ? and v.team == ? return v.name, v.born limit ?"
        )
        statement.bind(1, 30)
        statement.bind(2, "Lakers")
        statement.bind(3, 2)
        print("Placeholders:", statement.parameter_count())
        print("Rendered:", statement.render())

        with statement.execute_query() as result:
            while result.advance():
                born = result.get("v.born").as_date()
                print(result.get(1).as_str(), "born", born, "null:", result.was_null())

            print("Position after loop:", result.position.value)

        meta = statement.parameter_metadata()
        print("Parameter 2 kind:", meta.parameter_type_name(2))

        # Reading a string value as a timestamp is a coercion error.
        try:
            TypedValue.of("2024-03-01").as_timestamp()
        except TypeCoercionError as exc:
            print("Coercion failed as expected:", exc)


if __name__ == "__main__":
    main()
