"""
Typed accessors for the ``users`` and ``user_tags`` tables.

Each method of ``UserQueries`` runs exactly one SQL statement on a
short-lived connection and returns plain dataclass rows.  Errors from
the driver (``sqlite3.Error`` and subclasses such as
``sqlite3.IntegrityError``) propagate unchanged; translating them is
the job of the service layer.
"""

from dataclasses import dataclass
from typing import List, Optional

from meals_finder_api.app.core.db import get_cursor


@dataclass
class LoginUserRow:
    username: str
    passwdhash: str


@dataclass
class CreateUserParams:
    username: str
    passwdhash: str
    email: str
    phone_number: Optional[str] = None
    age: Optional[int] = None
    sex: Optional[str] = None


@dataclass
class UserDataRow:
    username: str
    email: str
    name: Optional[str]
    surname: Optional[str]
    phone_number: Optional[str]
    age: Optional[int]
    sex: Optional[str]
    weight: Optional[float]
    height: Optional[float]
    bmi: Optional[float]


@dataclass
class UpdateUserSettingsParams:
    username: str
    email: str
    name: Optional[str] = None
    surname: Optional[str] = None
    phone_number: Optional[str] = None
    age: Optional[int] = None
    sex: Optional[str] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    bmi: Optional[float] = None


@dataclass
class InsertUserTagParams:
    username: str
    tag_name: str
    tag_type: str


@dataclass
class UserTagRow:
    tag_name: str
    tag_type: str


class UserQueries:
    """Single-statement queries against the credential store."""

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url

    def login_user_with_username(self, username: str) -> Optional[LoginUserRow]:
        with get_cursor(self.database_url) as cursor:
            row = cursor.execute(
                "SELECT username, passwdhash FROM users WHERE username = ?",
                (username,),
            ).fetchone()
        if row is None:
            return None
        return LoginUserRow(username=row["username"], passwdhash=row["passwdhash"])

    def create_user(self, params: CreateUserParams) -> None:
        with get_cursor(self.database_url) as cursor:
            cursor.execute(
                "INSERT INTO users (username, passwdhash, email, phone_number, age, sex) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    params.username,
                    params.passwdhash,
                    params.email,
                    params.phone_number,
                    params.age,
                    params.sex,
                ),
            )

    def get_user_data(self, username: str) -> Optional[UserDataRow]:
        with get_cursor(self.database_url) as cursor:
            row = cursor.execute(
                "SELECT username, email, name, surname, phone_number, age, sex, weight, height, bmi "
                "FROM users WHERE username = ?",
                (username,),
            ).fetchone()
        if row is None:
            return None
        return UserDataRow(**{key: row[key] for key in row.keys()})

    def update_user_settings(self, params: UpdateUserSettingsParams) -> int:
        """Overwrite the profile fields; returns the number of rows changed."""
        with get_cursor(self.database_url) as cursor:
            cursor.execute(
                "UPDATE users SET email = ?, name = ?, surname = ?, phone_number = ?, age = ?, "
                "sex = ?, weight = ?, height = ?, bmi = ?, updated_at = CURRENT_TIMESTAMP "
                "WHERE username = ?",
                (
                    params.email,
                    params.name,
                    params.surname,
                    params.phone_number,
                    params.age,
                    params.sex,
                    params.weight,
                    params.height,
                    params.bmi,
                    params.username,
                ),
            )
            return cursor.rowcount

    def update_password(self, username: str, passwdhash: str) -> int:
        with get_cursor(self.database_url) as cursor:
            cursor.execute(
                "UPDATE users SET passwdhash = ?, updated_at = CURRENT_TIMESTAMP WHERE username = ?",
                (passwdhash, username),
            )
            return cursor.rowcount

    def insert_user_tag(self, params: InsertUserTagParams) -> None:
        with get_cursor(self.database_url) as cursor:
            cursor.execute(
                "INSERT INTO user_tags (username, tag_name, tag_type) VALUES (?, ?, ?)",
                (params.username, params.tag_name, params.tag_type),
            )

    def delete_user_tag(self, username: str, tag_name: str) -> int:
        with get_cursor(self.database_url) as cursor:
            cursor.execute(
                "DELETE FROM user_tags WHERE username = ? AND tag_name = ?",
                (username, tag_name),
            )
            return cursor.rowcount

    def display_user_tag(self, username: str) -> List[UserTagRow]:
        with get_cursor(self.database_url) as cursor:
            rows = cursor.execute(
                "SELECT tag_name, tag_type FROM user_tags WHERE username = ? ORDER BY tag_name",
                (username,),
            ).fetchall()
        return [UserTagRow(tag_name=row["tag_name"], tag_type=row["tag_type"]) for row in rows]
