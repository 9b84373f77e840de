import sqlite3
from pathlib import Path

import pytest
from argon2 import PasswordHasher

from identity_bootstrap.adapters.auth.crypto import Argon2PasswordHasher
from identity_bootstrap.app_shell.config import Settings
from identity_bootstrap.app_shell.context import ServiceContext
from identity_bootstrap.rules.loader import load_rules
from identity_bootstrap.rules.models import Rules

PROJECT_ROOT = Path(__file__).parent.parent

WRITE_PREFIXES = ("INSERT", "UPDATE", "DELETE", "CREATE", "DROP", "ALTER", "REPLACE")


def is_write(statement: str) -> bool:
    return statement.lstrip().upper().startswith(WRITE_PREFIXES)


@pytest.fixture
def rules() -> Rules:
    """The real rules.yaml from the project root."""
    return load_rules(PROJECT_ROOT / "rules.yaml")


@pytest.fixture
def fast_hasher() -> Argon2PasswordHasher:
    # Minimal argon2 cost keeps the suite quick; hashes stay verifiable
    return Argon2PasswordHasher(PasswordHasher(time_cost=1, memory_cost=64, parallelism=1))


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "identity.db")


@pytest.fixture
def settings(monkeypatch, tmp_path, db_path) -> Settings:
    monkeypatch.setenv("IDB_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("IDB_DB_PATH", db_path)
    monkeypatch.setenv("IDB_RULES_PATH", str(PROJECT_ROOT / "rules.yaml"))
    monkeypatch.setenv("IDB_ADMIN_USERNAME", "admin")
    monkeypatch.setenv("IDB_ADMIN_PASSWORD", "P@ss123!")
    return Settings()


@pytest.fixture
def make_ctx(settings, rules, fast_hasher):
    """Factory for fresh startup scopes against the same database file."""

    def _make(**rule_overrides) -> ServiceContext:
        effective = rules.model_copy(update=rule_overrides) if rule_overrides else rules
        return ServiceContext.create(settings, effective, hasher=fast_hasher)

    return _make


@pytest.fixture
def trace_writes(monkeypatch):
    """Record write statements (DDL and DML) issued through a context's connection."""

    def _trace(ctx: ServiceContext) -> list[str]:
        statements: list[str] = []
        original = ctx.database._connect

        def _connect() -> sqlite3.Connection:
            conn = original()
            conn.set_trace_callback(
                lambda sql: statements.append(sql) if is_write(sql) else None
            )
            return conn

        monkeypatch.setattr(ctx.database, "_connect", _connect)
        return statements

    return _trace
