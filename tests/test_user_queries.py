"""
Tests for the single-statement query layer and the schema migrations.
Driver errors must surface unchanged so the service layer can translate them.
"""

from __future__ import annotations

import sqlite3

import pytest

from meals_finder_api.app.core.db import MIGRATIONS, init_db
from meals_finder_api.app.repositories.user_queries import (
    CreateUserParams,
    InsertUserTagParams,
    UpdateUserSettingsParams,
    UserQueries,
    UserTagRow,
)


@pytest.fixture
def queries(database: str) -> UserQueries:
    q = UserQueries(database)
    q.create_user(CreateUserParams(username="alice", passwdhash="salt$hash", email="alice@example.com", age=31))
    return q


def test_init_db_is_idempotent(database: str) -> None:
    assert init_db(database) == MIGRATIONS[-1][0]
    assert init_db(database) == MIGRATIONS[-1][0]


def test_login_lookup(queries: UserQueries) -> None:
    row = queries.login_user_with_username("alice")

    assert row is not None
    assert row.username == "alice"
    assert row.passwdhash == "salt$hash"
    assert queries.login_user_with_username("bob") is None


def test_duplicate_username_raises_integrity_error(queries: UserQueries) -> None:
    with pytest.raises(sqlite3.IntegrityError):
        queries.create_user(CreateUserParams(username="alice", passwdhash="x$y", email="other@example.com"))


def test_get_user_data(queries: UserQueries) -> None:
    row = queries.get_user_data("alice")

    assert row is not None
    assert row.email == "alice@example.com"
    assert row.age == 31
    assert row.bmi is None
    assert queries.get_user_data("nobody") is None


def test_update_user_settings_overwrites_fields(queries: UserQueries) -> None:
    changed = queries.update_user_settings(
        UpdateUserSettingsParams(username="alice", email="new@example.com", name="Alice", weight=60.0, height=165.0, bmi=22.04)
    )

    assert changed == 1
    row = queries.get_user_data("alice")
    assert row.email == "new@example.com"
    assert row.name == "Alice"
    assert row.age is None
    assert row.bmi == pytest.approx(22.04)


def test_update_unknown_user_changes_nothing(queries: UserQueries) -> None:
    assert queries.update_user_settings(UpdateUserSettingsParams(username="ghost", email="g@example.com")) == 0


def test_update_password(queries: UserQueries) -> None:
    assert queries.update_password("alice", "new$hash") == 1
    assert queries.login_user_with_username("alice").passwdhash == "new$hash"
    assert queries.update_password("ghost", "new$hash") == 0


def test_tags_are_listed_by_name(queries: UserQueries) -> None:
    queries.insert_user_tag(InsertUserTagParams(username="alice", tag_name="vegan", tag_type="diet"))
    queries.insert_user_tag(InsertUserTagParams(username="alice", tag_name="peanuts", tag_type="allergy"))

    assert queries.display_user_tag("alice") == [
        UserTagRow(tag_name="peanuts", tag_type="allergy"),
        UserTagRow(tag_name="vegan", tag_type="diet"),
    ]
    assert queries.display_user_tag("bob") == []


def test_delete_tag(queries: UserQueries) -> None:
    queries.insert_user_tag(InsertUserTagParams(username="alice", tag_name="vegan", tag_type="diet"))

    assert queries.delete_user_tag("alice", "vegan") == 1
    assert queries.delete_user_tag("alice", "vegan") == 0
    assert queries.display_user_tag("alice") == []


def test_duplicate_tag_raises_integrity_error(queries: UserQueries) -> None:
    queries.insert_user_tag(InsertUserTagParams(username="alice", tag_name="vegan", tag_type="diet"))

    with pytest.raises(sqlite3.IntegrityError):
        queries.insert_user_tag(InsertUserTagParams(username="alice", tag_name="vegan", tag_type="lifestyle"))


def test_tag_for_unknown_user_violates_foreign_key(queries: UserQueries) -> None:
    with pytest.raises(sqlite3.IntegrityError):
        queries.insert_user_tag(InsertUserTagParams(username="ghost", tag_name="vegan", tag_type="diet"))


def test_missing_schema_raises_operational_error(tmp_path) -> None:
    with pytest.raises(sqlite3.OperationalError):
        UserQueries(str(tmp_path / "empty.db")).display_user_tag("alice")


def test_in_memory_database_is_rejected() -> None:
    # Each statement opens its own connection, so the schema would vanish.
    with pytest.raises(ValueError):
        init_db(":memory:")
