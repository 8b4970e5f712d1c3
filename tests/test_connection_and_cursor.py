from __future__ import annotations

import unittest
from datetime import date

import nebula_dbapi
from nebula_dbapi import (
    DATETIME,
    NUMBER,
    STRING,
    Connection,
    InMemoryGraphSession,
    connect,
)
from nebula_dbapi.core.contracts import ClosableSessionPort, GraphSessionPort
from nebula_dbapi.core.errors import (
    InterfaceError,
    NotSupportedError,
    OperationalError,
    PlaceholderCountMismatch,
    ProgrammingError,
    UnboundParameter,
)
from nebula_dbapi.core.result_cursor import ResultCursor
from nebula_dbapi.ports.graph_api.settings import ConnectionSettings

RAW = "match(v) where v.id = ? return v.name, ? as extra limit ?"
RENDERED = 'match(v) where v.id = 10 return v.name, "x" as extra limit 5'


class _BackendFailure(Exception):
    pass


def _session() -> InMemoryGraphSession:
    session = InMemoryGraphSession()
    session.add_result(
        RENDERED,
        ["v.name", "extra"],
        [("alice", "x"), ("bob", "x")],
    )
    session.add_result(
        "match (p:Person) return p.name, p.age, p.born",
        ["p.name", "p.age", "p.born"],
        [
            ("alice", 31, date(1993, 1, 2)),
            ("bob", None, date(1990, 5, 6)),
            ("carol", 27, date(1997, 7, 8)),
        ],
    )
    return session


class ModuleGlobalsTests(unittest.TestCase):
    def test_dbapi_globals(self) -> None:
        self.assertEqual(nebula_dbapi.apilevel, "2.0")
        self.assertEqual(nebula_dbapi.threadsafety, 1)
        self.assertEqual(nebula_dbapi.paramstyle, "qmark")
        self.assertEqual(nebula_dbapi.ValueKind.DECIMAL, NUMBER)
        self.assertEqual(nebula_dbapi.ValueKind.ZONED_DATETIME, DATETIME)
        self.assertNotEqual(nebula_dbapi.ValueKind.INT, STRING)
        self.assertNotEqual(nebula_dbapi.BINARY, STRING)

    def test_type_objects_are_not_hashable(self) -> None:
        self.assertEqual(STRING, nebula_dbapi.ValueKind.STRING)
        for type_object in (STRING, NUMBER, DATETIME, nebula_dbapi.BINARY, nebula_dbapi.ROWID):
            with self.subTest(type_object=type_object):
                with self.assertRaises(TypeError):
                    hash(type_object)
        with self.assertRaises(TypeError):
            {nebula_dbapi.ValueKind.STRING: 1}.get(STRING)


class ConnectionTests(unittest.TestCase):
    def test_session_is_configured_on_connect(self) -> None:
        session = _session()
        conn = connect(session, schema="s", graph="g", timezone="UTC")

        self.assertEqual(
            session.executed,
            ['SESSION SET SCHEMA "s"', "SESSION SET GRAPH g", 'SESSION SET TIME ZONE "UTC"'],
        )
        self.assertEqual(conn.settings.graph, "g")
        conn.close()

    def test_failed_configuration_closes_session(self) -> None:
        session = InMemoryGraphSession(accept_session_commands=False)

        with self.assertRaises(OperationalError) as ctx:
            Connection(session, ConnectionSettings(graph="missing"))

        self.assertIsInstance(ctx.exception.__cause__, KeyError)
        self.assertIn("SESSION SET GRAPH missing", str(ctx.exception))
        self.assertTrue(session.closed)

    def test_connect_with_url_and_factory(self) -> None:
        received: list[ConnectionSettings] = []

        def factory(settings: ConnectionSettings) -> InMemoryGraphSession:
            received.append(settings)
            return _session()

        conn = connect(
            url="nebula://h1:9669/social?timezone=UTC",
            session_factory=factory,
            requestTimeout=250,
        )

        self.assertEqual(received[0].addresses, (("h1", 9669),))
        self.assertEqual(received[0].request_timeout_ms, 250)
        self.assertEqual(
            conn.session.executed,  # type: ignore[union-attr]
            ["SESSION SET GRAPH social", 'SESSION SET TIME ZONE "UTC"'],
        )
        conn.close()

    def test_connect_requires_session_or_factory(self) -> None:
        with self.assertRaises(InterfaceError):
            connect(graph="g")

    def test_close_is_idempotent_and_closes_owned_session(self) -> None:
        session = _session()
        conn = connect(session)

        with self.assertLogs("nebula_dbapi.ports.graph_api.connection", level="INFO") as logs:
            conn.close()
        conn.close()

        self.assertTrue(conn.closed)
        self.assertTrue(session.closed)
        self.assertEqual(len(logs.output), 1)
        self.assertIn("connection closed", logs.output[0])
        for call in (conn.cursor, conn.commit, lambda: conn.prepare("return 1")):
            with self.assertRaises(InterfaceError):
                call()
        with self.assertRaises(InterfaceError):
            conn.execute_query("return 1")

    def test_borrowed_session_stays_open(self) -> None:
        session = _session()
        with connect(session, owns_session=False) as conn:
            conn.cursor()
        self.assertTrue(conn.closed)
        self.assertFalse(session.closed)

    def test_session_without_close_is_accepted(self) -> None:
        class _ExecuteOnly:
            def execute(self, query_text: str):
                return ["n"], iter([(1,)])

        session = _ExecuteOnly()
        self.assertIsInstance(session, GraphSessionPort)
        self.assertNotIsInstance(session, ClosableSessionPort)
        self.assertIsInstance(_session(), ClosableSessionPort)

        conn = connect(session)
        self.assertEqual(conn.cursor().execute("return 1").fetchall(), [(1,)])
        conn.close()
        self.assertTrue(conn.closed)

    def test_commit_is_accepted_and_rollback_is_not_supported(self) -> None:
        conn = connect(_session())
        conn.commit()
        with self.assertRaises(NotSupportedError):
            conn.rollback()
        conn.close()

    def test_prepared_statement_round_trip(self) -> None:
        conn = connect(_session())
        statement = conn.prepare(RAW)
        statement.bind(3, 5)
        statement.bind(1, 10)
        statement.bind(2, "x")

        result = statement.execute_query()

        self.assertIsInstance(result, ResultCursor)
        self.assertTrue(result.advance())
        self.assertEqual(result.get("v.name").as_str(), "alice")
        self.assertEqual(statement.parameter_metadata().parameter_type_name(2), "string")
        conn.close()

    def test_backend_errors_propagate_unmodified(self) -> None:
        session = _session()

        def failing(query_text: str):
            raise _BackendFailure(query_text)

        session.add_responder(failing)
        conn = connect(session)

        with self.assertRaises(_BackendFailure):
            conn.execute_query("match (v) return bad syntax")
        with self.assertRaises(_BackendFailure):
            conn.cursor().execute("return ?", [1])
        conn.close()

    def test_closing_result_does_not_touch_session(self) -> None:
        session = _session()
        conn = connect(session)
        result = conn.execute_query(RENDERED)
        result.close()

        self.assertFalse(session.closed)
        self.assertTrue(conn.execute_query(RENDERED).advance())
        conn.close()


class CursorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.session = _session()
        self.conn = connect(self.session)
        self.cur = self.conn.cursor()

    def tearDown(self) -> None:
        self.cur.close()
        self.conn.close()

    def test_execute_binds_and_fetches(self) -> None:
        rows = self.cur.execute(RAW, (10, "x", 5)).fetchall()

        self.assertEqual(rows, [("alice", "x"), ("bob", "x")])
        self.assertEqual(self.session.executed[-1], RENDERED)
        self.assertEqual(self.cur.rowcount, 2)

    def test_mapping_parameters_are_one_based(self) -> None:
        self.cur.execute(RAW, {3: 5, 1: 10, 2: "x"})
        self.assertEqual(self.cur.fetchone(), ("alice", "x"))

    def test_description_and_rowcount(self) -> None:
        self.assertIsNone(self.cur.description)
        self.cur.execute("match (p:Person) return p.name, p.age, p.born")

        self.assertEqual([item[0] for item in self.cur.description], ["p.name", "p.age", "p.born"])
        self.assertEqual([item[1] for item in self.cur.description], [None, None, None])
        self.assertEqual(self.cur.rowcount, -1)

        self.cur.fetchone()
        codes = [item[1] for item in self.cur.description]
        self.assertEqual(codes[0], STRING)
        self.assertEqual(codes[1], NUMBER)
        self.assertEqual(codes[2], DATETIME)
        self.assertEqual(self.cur.rownumber, 1)

    def test_fetchmany_uses_arraysize(self) -> None:
        self.cur.execute("match (p:Person) return p.name, p.age, p.born")
        self.cur.arraysize = 2

        self.assertEqual([row[0] for row in self.cur.fetchmany()], ["alice", "bob"])
        self.assertEqual([row[0] for row in self.cur.fetchmany(5)], ["carol"])
        self.assertEqual(self.cur.fetchmany(), [])
        self.assertIsNone(self.cur.fetchone())
        self.assertEqual(self.cur.rowcount, 3)

    def test_iteration_and_result_access(self) -> None:
        self.cur.execute("match (p:Person) return p.name, p.age, p.born")
        names = [row[0] for row in self.cur]
        self.assertEqual(names, ["alice", "bob", "carol"])
        self.assertTrue(self.cur.result.is_after_last())

    def test_result_cursor_gives_column_access(self) -> None:
        self.cur.execute("match (p:Person) return p.name, p.age, p.born")
        result = self.cur.result
        result.advance()
        result.advance()

        self.assertIsNone(result.get("p.age").as_int())
        self.assertTrue(result.was_null())
        self.assertEqual(result.get(3).as_date(), date(1990, 5, 6))

    def test_new_execute_closes_previous_result(self) -> None:
        self.cur.execute("match (p:Person) return p.name, p.age, p.born")
        first = self.cur.result
        self.cur.execute(RAW, [10, "x", 5])

        self.assertTrue(first.is_closed())
        self.assertFalse(self.cur.result.is_closed())

    def test_parameter_errors(self) -> None:
        with self.assertRaises(UnboundParameter):
            self.cur.execute(RAW, [10, "x"])
        with self.assertRaises(PlaceholderCountMismatch):
            self.cur.execute(RAW, [10, "x", 5, 6])
        with self.assertRaises(ProgrammingError):
            self.cur.execute(RAW, "abc")

    def test_fetch_without_execute_fails(self) -> None:
        with self.assertRaises(InterfaceError):
            self.cur.fetchone()

    def test_executemany_is_not_supported(self) -> None:
        with self.assertRaises(NotSupportedError):
            self.cur.executemany(RAW, [[1, "x", 2]])

    def test_closed_cursor_rejects_calls(self) -> None:
        self.cur.execute(RAW, [10, "x", 5])
        result = self.cur.result
        self.cur.close()
        self.cur.close()

        self.assertTrue(self.cur.closed)
        self.assertTrue(result.is_closed())
        with self.assertRaises(InterfaceError):
            self.cur.fetchall()
        with self.assertRaises(InterfaceError):
            self.cur.execute("return 1")

    def test_noop_size_hints(self) -> None:
        self.cur.setinputsizes([10])
        self.cur.setoutputsize(10)


if __name__ == "__main__":
    unittest.main()
