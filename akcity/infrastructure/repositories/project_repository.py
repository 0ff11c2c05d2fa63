"""Repository for Project persistence."""

import json
import sqlite3
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from akcity.domain.clock import utcnow
from akcity.domain.errors import NotFoundError
from akcity.domain.models import Project, ProjectStatus
from akcity.infrastructure.persistence.sqlite import SQLiteDatabase

_TEAM_MEMBER_CLAUSE = (
    "EXISTS (SELECT 1 FROM json_each(projects.document, '$.team') AS member WHERE member.value = ?)"
)


class SQLiteProjectRepository:
    """Repository for managing Project entities in SQLite."""

    def __init__(self, database: SQLiteDatabase):
        self._db = database

    def create(self, project: Project) -> Project:
        if project.id is None:
            project.id = uuid.uuid4().hex
        data = project.to_persistence()
        with self._db.write() as conn:
            conn.execute(
                """
                INSERT INTO projects (
                    id, name, description, status, progress, project_manager,
                    end_date, document, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    project.id,
                    project.name,
                    project.description,
                    project.status.value,
                    project.progress,
                    project.project_manager,
                    data["end_date"],
                    json.dumps(data),
                    data["created_at"],
                    data["updated_at"],
                ),
            )
        return project

    def update(self, project: Project) -> Project:
        data = project.to_persistence()
        with self._db.write() as conn:
            cursor = conn.execute(
                """
                UPDATE projects
                SET name = ?, description = ?, status = ?, progress = ?, project_manager = ?,
                    end_date = ?, document = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    project.name,
                    project.description,
                    project.status.value,
                    project.progress,
                    project.project_manager,
                    data["end_date"],
                    json.dumps(data),
                    data["updated_at"],
                    project.id,
                ),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Project not found")
        return project

    def delete(self, project_id: str) -> bool:
        with self._db.write() as conn:
            cursor = conn.execute("DELETE FROM projects WHERE id = ?", (project_id,))
        return cursor.rowcount > 0

    def find_by_id(self, project_id: str) -> Optional[Project]:
        with self._db.read() as conn:
            row = conn.execute("SELECT id, document FROM projects WHERE id = ?", (project_id,)).fetchone()
        return self._row_to_project(row) if row else None

    def find_all(
        self,
        *,
        status: Optional[ProjectStatus] = None,
        project_manager: Optional[str] = None,
        team_member: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Tuple[List[Project], int]:
        clauses: List[str] = []
        params: List[Any] = []
        if status:
            clauses.append("status = ?")
            params.append(ProjectStatus(status).value)
        if project_manager:
            clauses.append("project_manager = ?")
            params.append(project_manager)
        if team_member:
            clauses.append(_TEAM_MEMBER_CLAUSE)
            params.append(team_member)
        if search:
            clauses.append("(name LIKE ? OR description LIKE ?)")
            params.extend([f"%{search}%", f"%{search}%"])
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with self._db.read() as conn:
            total = conn.execute(f"SELECT COUNT(*) FROM projects {where}", params).fetchone()[0]
            rows = conn.execute(
                f"SELECT id, document FROM projects {where} ORDER BY created_at DESC LIMIT ? OFFSET ?",
                [*params, limit, offset],
            ).fetchall()
        return [self._row_to_project(row) for row in rows], total

    def find_by_manager(self, manager_id: str) -> List[Project]:
        return self._select("WHERE project_manager = ?", (manager_id,))

    def find_by_team_member(self, user_id: str) -> List[Project]:
        return self._select(f"WHERE {_TEAM_MEMBER_CLAUSE}", (user_id,))

    def find_overdue(self, now: Optional[datetime] = None) -> List[Project]:
        now = now or utcnow()
        return self._select(
            "WHERE status = ? AND end_date < ?",
            (ProjectStatus.IN_PROGRESS.value, now.isoformat()),
        )

    def count(self) -> int:
        with self._db.read() as conn:
            return conn.execute("SELECT COUNT(*) FROM projects").fetchone()[0]

    def count_by_status(self) -> Dict[str, int]:
        counts = {status.value: 0 for status in ProjectStatus}
        with self._db.read() as conn:
            rows = conn.execute("SELECT status, COUNT(*) AS total FROM projects GROUP BY status").fetchall()
        counts.update({row["status"]: row["total"] for row in rows})
        return counts

    def _select(self, where: str, params: tuple) -> List[Project]:
        with self._db.read() as conn:
            rows = conn.execute(
                f"SELECT id, document FROM projects {where} ORDER BY created_at DESC", params
            ).fetchall()
        return [self._row_to_project(row) for row in rows]

    @staticmethod
    def _row_to_project(row: sqlite3.Row) -> Project:
        data: Dict[str, Any] = json.loads(row["document"])
        data["id"] = row["id"]
        return Project.from_persistence(data)
