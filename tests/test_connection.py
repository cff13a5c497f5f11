"""
Tests for the connection lifecycle

Tests cover:
- Implicit per-call connections
- Explicit sessions (begin/end, async with, session(block))
- Release of the connection on every exit path
- Connection failures
"""
import asyncio

import aiosqlite
import pytest

from forzendb import DatabaseConnectionError, ForzenSqliteDb, NoConnectionError, QueryError
from forzendb.database import connection as connection_module
from forzendb.database.connection import ConnectionManager

from .test_helpers import TableTestHelper


class TestImplicitSessions:
    """Calls made outside a session open and close their own connection"""

    async def test_each_call_leaves_connection_closed(self, db):
        assert db.is_open is False

        await db.exec('CREATE TABLE a (x INTEGER);')
        assert db.is_open is False

        await db.run('INSERT INTO a (x) VALUES (?)', [1])
        assert db.is_open is False

        await db.get('SELECT x FROM a')
        assert db.is_open is False

        await db.all('SELECT x FROM a')
        assert db.is_open is False

    async def test_failed_call_still_closes(self, db):
        for call in (
            db.exec('NOT SQL'),
            db.run('NOT SQL'),
            db.get('NOT SQL'),
            db.all('NOT SQL'),
        ):
            with pytest.raises(QueryError):
                await call
            assert db.is_open is False

    async def test_writes_are_visible_to_later_calls(self, temp_db):
        writer = ForzenSqliteDb(temp_db)
        await writer.exec('CREATE TABLE a (x INTEGER); INSERT INTO a VALUES (7);')

        reader = ForzenSqliteDb(temp_db)
        assert await reader.all('SELECT x FROM a') == [{'x': 7}]


class TestExplicitSessions:
    """Calls made inside a session share one connection"""

    async def test_begin_and_end(self, db):
        await db.begin_session()
        assert db.is_open is True

        connection = db.connection_manager.connection
        await db.exec('CREATE TABLE a (x INTEGER);')
        await db.run('INSERT INTO a (x) VALUES (?)', [1])

        assert db.is_open is True
        assert db.connection_manager.connection is connection

        await db.end_session()
        assert db.is_open is False

    async def test_end_session_is_idempotent(self, db):
        await db.end_session()
        await db.begin_session()
        await db.end_session()
        await db.end_session()
        assert db.is_open is False

    async def test_begin_session_twice_keeps_handle(self, db):
        await db.begin_session()
        first = db.connection_manager.connection

        await db.begin_session()
        assert db.connection_manager.connection is first

    async def test_concurrent_begin_session_opens_once(self, db, monkeypatch):
        calls = []
        original_connect = aiosqlite.connect

        def counting_connect(*args, **kwargs):
            calls.append(args)
            return original_connect(*args, **kwargs)

        monkeypatch.setattr(connection_module.aiosqlite, 'connect', counting_connect)

        await asyncio.gather(db.begin_session(), db.begin_session())

        assert len(calls) == 1
        assert db.is_open is True

    async def test_failure_inside_session_keeps_it_open(self, db):
        await db.begin_session()

        with pytest.raises(QueryError):
            await db.exec('NOT SQL')

        assert db.is_open is True

    async def test_context_manager(self, db):
        async with db as scoped:
            assert scoped is db
            assert db.is_open is True
            await db.create_table(TableTestHelper.foo_bar_table())

        assert db.is_open is False

    async def test_context_manager_closes_on_error(self, db):
        with pytest.raises(RuntimeError):
            async with db:
                raise RuntimeError('boom')

        assert db.is_open is False

    async def test_nested_scope_leaves_outer_session_open(self, db):
        await db.begin_session()

        async with db:
            await db.exec('CREATE TABLE a (x INTEGER);')

        assert db.is_open is True


class TestSessionBlock:
    """Tests for session(block)"""

    async def test_awaits_async_block_before_closing(self, db):
        await db.create_table(TableTestHelper.foo_bar_table())
        seen_open = []

        async def block():
            await asyncio.sleep(0.01)
            seen_open.append(db.is_open)
            await db.insert({'table_name': 't', 'foo': 1, 'bar': 'x'})
            await asyncio.sleep(0.01)
            return await db.all('SELECT foo, bar FROM t')

        result = await db.session(block)

        assert result == [{'foo': 1, 'bar': 'x'}]
        assert seen_open == [True]
        assert db.is_open is False

    async def test_session_ends_already_open_session(self, db):
        await db.begin_session()

        assert await db.session(lambda: 'done') == 'done'
        assert db.is_open is False

    async def test_session_ends_already_open_session_on_error(self, db):
        await db.begin_session()

        async def block():
            raise ValueError('async failure')

        with pytest.raises(ValueError):
            await db.session(block)

        assert db.is_open is False

    async def test_sync_block(self, db):
        assert await db.session(lambda: 42) == 42
        assert db.is_open is False

    async def test_block_raising_closes_connection(self, db):
        def block():
            raise ValueError('sync failure')

        with pytest.raises(ValueError):
            await db.session(block)

        assert db.is_open is False

    async def test_async_block_raising_closes_connection(self, db):
        async def block():
            await db.exec('CREATE TABLE a (x INTEGER);')
            await db.exec('NOT SQL')

        with pytest.raises(QueryError):
            await db.session(block)

        assert db.is_open is False


class TestConnectionManager:
    """Tests for ConnectionManager"""

    async def test_connection_property_when_closed(self, temp_db):
        manager = ConnectionManager(temp_db)

        with pytest.raises(NoConnectionError):
            manager.connection

    async def test_open_reports_whether_it_opened(self, temp_db):
        manager = ConnectionManager(temp_db)

        assert await manager.open() is True
        assert await manager.open() is False

        await manager.close()
        assert manager.is_open is False

    async def test_rows_are_mappings(self, temp_db):
        manager = ConnectionManager(temp_db)
        await manager.open()
        try:
            assert manager.connection.row_factory is aiosqlite.Row
        finally:
            await manager.close()

    async def test_inaccessible_path(self, tmp_path):
        db = ForzenSqliteDb(tmp_path / 'missing' / 'forzen.db')

        with pytest.raises(DatabaseConnectionError) as exc_info:
            await db.begin_session()

        assert db.is_open is False
        assert exc_info.value.details['db_path'].endswith('forzen.db')

    async def test_inaccessible_path_on_implicit_call(self, tmp_path):
        db = ForzenSqliteDb(tmp_path / 'missing' / 'forzen.db')

        with pytest.raises(DatabaseConnectionError):
            await db.all('SELECT 1')

        assert db.is_open is False


class TestCloseFailures:
    """A failing close must not hide the error that triggered it"""

    @staticmethod
    def _failing_close(manager, monkeypatch):
        original_close = manager.close

        async def failing_close():
            was_open = manager.is_open
            await original_close()
            if was_open:
                raise DatabaseConnectionError('close failed')

        monkeypatch.setattr(manager, 'close', failing_close)

    async def test_query_error_survives_failing_implicit_close(self, db, monkeypatch):
        self._failing_close(db.connection_manager, monkeypatch)

        with pytest.raises(QueryError):
            await db.all('NOT SQL')

        assert db.is_open is False

    async def test_failing_implicit_close_after_success_is_raised(self, db, monkeypatch):
        self._failing_close(db.connection_manager, monkeypatch)

        with pytest.raises(DatabaseConnectionError):
            await db.all('SELECT 1')

    async def test_block_error_survives_failing_session_close(self, db, monkeypatch):
        self._failing_close(db.connection_manager, monkeypatch)

        def block():
            raise ValueError('block failure')

        with pytest.raises(ValueError):
            await db.session(block)

        assert db.is_open is False
