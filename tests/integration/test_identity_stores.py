import asyncio

import pytest

from identity_bootstrap.adapters.sqlite.database import IdentityDatabase
from identity_bootstrap.adapters.sqlite.stores import SQLiteRoleStore, SQLiteUserStore
from identity_bootstrap.domain.entities import Role, User
from identity_bootstrap.domain.errors import DatabaseClosedError


def run_in_db(db_path, scenario):
    """Open a migrated database, run ``scenario(db)`` and close it again."""

    async def _main():
        async with IdentityDatabase(db_path) as db:
            await db.ensure_created()
            return await scenario(db)

    return asyncio.run(_main())


def test_database_scope_opens_and_closes(db_path):
    db = IdentityDatabase(db_path)

    async def _main():
        async with db:
            assert db.is_open
        assert not db.is_open

    asyncio.run(_main())


def test_closed_database_refuses_work(db_path):
    db = IdentityDatabase(db_path)

    with pytest.raises(DatabaseClosedError):
        asyncio.run(db.ensure_created())


def test_ensure_created_reports_first_creation_only(db_path):
    async def scenario(db):
        return await db.ensure_created()

    # run_in_db already created the schema once
    assert run_in_db(db_path, scenario) is False


def test_role_roundtrip(db_path):
    async def scenario(db):
        store = SQLiteRoleStore(db)
        role = Role(name="admin")
        outcome = await store.create(role)
        return outcome, role, await store.find_by_name("admin"), await store.list_all()

    outcome, role, fetched, listed = run_in_db(db_path, scenario)

    assert outcome.succeeded
    assert fetched == role
    assert listed == [role]


def test_role_lookup_is_exact_but_normalized_lookup_is_not(db_path):
    async def scenario(db):
        store = SQLiteRoleStore(db)
        await store.create(Role(name="Admin"))
        return await store.find_by_name("admin"), await store.find_by_normalized_name("ADMIN")

    exact, normalized = run_in_db(db_path, scenario)

    assert exact is None
    assert normalized is not None and normalized.name == "Admin"


def test_role_unique_constraint_yields_generic_failure(db_path):
    async def scenario(db):
        store = SQLiteRoleStore(db)
        await store.create(Role(name="admin"))
        return await store.create(Role(name="ADMIN")), await store.list_all()

    outcome, roles = run_in_db(db_path, scenario)

    assert outcome.succeeded is False
    assert [e.code for e in outcome.errors] == ["DefaultError"]
    assert len(roles) == 1


def test_user_roundtrip_with_membership(db_path):
    async def scenario(db):
        users = SQLiteUserStore(db)
        roles = SQLiteRoleStore(db)
        role = Role(name="admin")
        await roles.create(role)
        user = User(user_name="admin", display_name="Administrator", password_hash="h")
        await users.create(user)
        added = await users.add_to_role(user.id, role.id)
        return added, user, await users.find_by_name("admin")

    added, user, fetched = run_in_db(db_path, scenario)

    assert added.succeeded
    assert fetched is not None
    assert fetched.id == user.id
    assert fetched.display_name == "Administrator"
    assert fetched.password_hash == "h"
    assert fetched.roles == ["admin"]
    assert fetched.created_at == user.created_at


def test_duplicate_membership_is_rejected(db_path):
    async def scenario(db):
        users = SQLiteUserStore(db)
        roles = SQLiteRoleStore(db)
        role = Role(name="admin")
        user = User(user_name="admin")
        await roles.create(role)
        await users.create(user)
        await users.add_to_role(user.id, role.id)
        return await users.add_to_role(user.id, role.id), await users.get_roles(user.id)

    outcome, memberships = run_in_db(db_path, scenario)

    assert outcome.succeeded is False
    assert memberships == ["admin"]


def test_missing_user(db_path):
    async def scenario(db):
        return await SQLiteUserStore(db).find_by_name("ghost")

    assert run_in_db(db_path, scenario) is None
