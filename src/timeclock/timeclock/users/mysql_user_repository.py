from __future__ import annotations

import uuid
from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import User
from .repository import UserRepository


def _to_user(row: dict) -> User:
    return User(
        user_id=str(row["user_id"]),
        full_name=row["full_name"],
        username=row["username"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, username, password_hash, role, is_active
                FROM users
                WHERE user_id=%s
                """,
                (str(user_id),),
            )
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, username, password_hash, role, is_active
                FROM users
                WHERE username=%s
                """,
                (username,),
            )
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(
        self,
        *,
        full_name: str,
        username: str,
        password_hash: str,
        role: Role,
    ) -> str:
        user_id = uuid.uuid4().hex
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(user_id, full_name, username, password_hash, role, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (user_id, full_name, username, password_hash, role.value),
            )
        return user_id
