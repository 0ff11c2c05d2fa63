"""Repository for User persistence."""

import json
import sqlite3
import uuid
from typing import Any, Dict, List, Optional, Tuple

from akcity.domain.errors import DuplicateEmailError, NotFoundError
from akcity.domain.models import User, UserRole, UserStatus
from akcity.infrastructure.persistence.sqlite import SQLiteDatabase


class SQLiteUserRepository:
    """Repository for managing User entities in SQLite."""

    def __init__(self, database: SQLiteDatabase):
        self._db = database

    def create(self, user: User) -> User:
        """Insert a new user. Raises DuplicateEmailError when the e-mail is taken."""
        if user.id is None:
            user.id = uuid.uuid4().hex
        data = user.to_persistence()
        with self._db.write() as conn:
            try:
                conn.execute(
                    """
                    INSERT INTO users (id, email, name, role, status, document, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        user.id,
                        user.email,
                        user.name,
                        user.role.value,
                        user.status.value,
                        json.dumps(data),
                        data["created_at"],
                        data["updated_at"],
                    ),
                )
            except sqlite3.IntegrityError as exc:
                raise DuplicateEmailError() from exc
        return user

    def update(self, user: User) -> User:
        """Write every field of ``user`` back to storage."""
        data = user.to_persistence()
        with self._db.write() as conn:
            try:
                cursor = conn.execute(
                    """
                    UPDATE users
                    SET email = ?, name = ?, role = ?, status = ?, document = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        user.email,
                        user.name,
                        user.role.value,
                        user.status.value,
                        json.dumps(data),
                        data["updated_at"],
                        user.id,
                    ),
                )
            except sqlite3.IntegrityError as exc:
                raise DuplicateEmailError() from exc
            if cursor.rowcount == 0:
                raise NotFoundError("User not found")
        return user

    def delete(self, user_id: str) -> bool:
        with self._db.write() as conn:
            cursor = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
        return cursor.rowcount > 0

    def find_by_id(self, user_id: str) -> Optional[User]:
        with self._db.read() as conn:
            row = conn.execute("SELECT id, document FROM users WHERE id = ?", (user_id,)).fetchone()
        return self._row_to_user(row) if row else None

    def find_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup; stored e-mails are always lowercase."""
        with self._db.read() as conn:
            row = conn.execute(
                "SELECT id, document FROM users WHERE email = ?", (email.strip().lower(),)
            ).fetchone()
        return self._row_to_user(row) if row else None

    def find_all(
        self,
        *,
        role: Optional[UserRole] = None,
        status: Optional[UserStatus] = None,
        search: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Tuple[List[User], int]:
        clauses: List[str] = []
        params: List[Any] = []
        if role:
            clauses.append("role = ?")
            params.append(UserRole(role).value)
        if status:
            clauses.append("status = ?")
            params.append(UserStatus(status).value)
        if search:
            clauses.append("(name LIKE ? OR email LIKE ?)")
            params.extend([f"%{search}%", f"%{search}%"])
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with self._db.read() as conn:
            total = conn.execute(f"SELECT COUNT(*) FROM users {where}", params).fetchone()[0]
            rows = conn.execute(
                f"SELECT id, document FROM users {where} ORDER BY created_at DESC LIMIT ? OFFSET ?",
                [*params, limit, offset],
            ).fetchall()
        return [self._row_to_user(row) for row in rows], total

    def find_by_role(self, role: UserRole) -> List[User]:
        with self._db.read() as conn:
            rows = conn.execute(
                "SELECT id, document FROM users WHERE role = ? ORDER BY created_at", (UserRole(role).value,)
            ).fetchall()
        return [self._row_to_user(row) for row in rows]

    def add_to_project(self, user_id: str, project_id: str) -> None:
        self._mutate(user_id, lambda user: user.join_project(project_id))

    def remove_from_project(self, user_id: str, project_id: str) -> None:
        self._mutate(user_id, lambda user: user.leave_project(project_id))

    def count(self) -> int:
        with self._db.read() as conn:
            return conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]

    def count_by_role(self) -> Dict[str, int]:
        return self._group_count("role")

    def count_by_status(self) -> Dict[str, int]:
        return self._group_count("status")

    def _group_count(self, column: str) -> Dict[str, int]:
        with self._db.read() as conn:
            rows = conn.execute(f"SELECT {column} AS key, COUNT(*) AS total FROM users GROUP BY {column}").fetchall()
        return {row["key"]: row["total"] for row in rows}

    def _mutate(self, user_id: str, change) -> None:
        # Read-modify-write under one lock so concurrent membership edits don't interleave.
        with self._db.write() as conn:
            row = conn.execute("SELECT id, document FROM users WHERE id = ?", (user_id,)).fetchone()
            if not row:
                raise NotFoundError("User not found")
            user = self._row_to_user(row)
            change(user)
            data = user.to_persistence()
            conn.execute(
                "UPDATE users SET document = ?, updated_at = ? WHERE id = ?",
                (json.dumps(data), data["updated_at"], user_id),
            )

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        data: Dict[str, Any] = json.loads(row["document"])
        data["id"] = row["id"]
        return User.from_persistence(data)
