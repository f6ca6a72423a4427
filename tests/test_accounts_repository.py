from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from secret_keeper.domain.entities.user import LocalCredential
from secret_keeper.domain.exceptions import StoreUnavailableError
from secret_keeper.infrastructure.db.repositories.accounts_repository import SqlAccountsRepository


CREATED_AT = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeResult:
    def __init__(self, row):
        self._row = row

    def mappings(self):
        return self

    def first(self):
        return self._row


class RecordingConnection:
    def __init__(self, row):
        self._row = row
        self.statements: list[tuple[str, dict]] = []

    def execute(self, statement, params=None):
        self.statements.append((str(statement), params))
        return FakeResult(self._row)


class StubEngine:
    def __init__(self, *, row=None, error: Exception | None = None):
        self.connection = RecordingConnection(row)
        self._error = error

    @contextmanager
    def begin(self):
        if self._error is not None:
            raise self._error
        yield self.connection

    connect = begin


class PgError(Exception):
    def __init__(self, sqlstate: str):
        super().__init__(sqlstate)
        self.sqlstate = sqlstate


def _insert(repository: SqlAccountsRepository):
    return repository.insert_user_if_absent(
        user_id="user-1",
        email="alice@example.com",
        auth_provider="local",
        password_hash="$2b$10$digest",
        created_at=CREATED_AT,
    )


def test_insert_is_single_statement_with_conflict_guard():
    engine = StubEngine(
        row={
            "id": "user-1",
            "email": "alice@example.com",
            "auth_provider": "local",
            "password_hash": "$2b$10$digest",
            "secret": None,
            "created_at": CREATED_AT,
        }
    )

    user = _insert(SqlAccountsRepository(engine))

    assert user.credential == LocalCredential(password_hash="$2b$10$digest")
    assert len(engine.connection.statements) == 1
    sql, params = engine.connection.statements[0]
    assert "INSERT INTO public.users" in sql
    assert "ON CONFLICT (email) DO NOTHING" in sql
    assert "RETURNING id, email, auth_provider, password_hash, secret, created_at" in sql
    assert params["email"] == "alice@example.com"
    assert params["password_hash"] == "$2b$10$digest"


def test_insert_returns_none_when_conflict_absorbs_the_row():
    assert _insert(SqlAccountsRepository(StubEngine(row=None))) is None


def test_insert_treats_unique_violation_as_existing_row():
    error = IntegrityError("INSERT INTO public.users", {}, PgError("23505"))

    assert _insert(SqlAccountsRepository(StubEngine(error=error))) is None


def test_insert_reports_other_integrity_errors_as_store_failure():
    error = IntegrityError("INSERT INTO public.users", {}, PgError("23514"))

    with pytest.raises(StoreUnavailableError):
        _insert(SqlAccountsRepository(StubEngine(error=error)))


def test_insert_reports_connection_failure_as_store_failure():
    error = OperationalError("INSERT INTO public.users", {}, Exception("connection refused"))

    with pytest.raises(StoreUnavailableError):
        _insert(SqlAccountsRepository(StubEngine(error=error)))


def test_lookup_reports_connection_failure_as_store_failure():
    error = OperationalError("SELECT", {}, Exception("connection refused"))

    with pytest.raises(StoreUnavailableError):
        SqlAccountsRepository(StubEngine(error=error)).get_user_by_email(email="alice@example.com")
