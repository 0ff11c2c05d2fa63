"""Repository for Task persistence."""

import json
import sqlite3
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from akcity.domain.clock import utcnow
from akcity.domain.errors import NotFoundError
from akcity.domain.models import Task, TaskCategory, TaskPriority, TaskStatus
from akcity.infrastructure.persistence.sqlite import SQLiteDatabase

_OPEN_STATUSES = (TaskStatus.PENDING.value, TaskStatus.IN_PROGRESS.value)


class SQLiteTaskRepository:
    """Repository for managing Task entities in SQLite."""

    def __init__(self, database: SQLiteDatabase):
        self._db = database

    def create(self, task: Task) -> Task:
        if task.id is None:
            task.id = uuid.uuid4().hex
        data = task.to_persistence()
        with self._db.write() as conn:
            conn.execute(
                """
                INSERT INTO tasks (
                    id, title, description, project, assigned_to, assigned_by, status,
                    priority, category, due_date, document, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task.id,
                    task.title,
                    task.description,
                    task.project,
                    task.assigned_to,
                    task.assigned_by,
                    task.status.value,
                    task.priority.value,
                    task.category.value,
                    data["due_date"],
                    json.dumps(data),
                    data["created_at"],
                    data["updated_at"],
                ),
            )
        return task

    def update(self, task: Task) -> Task:
        data = task.to_persistence()
        with self._db.write() as conn:
            cursor = conn.execute(
                """
                UPDATE tasks
                SET title = ?, description = ?, assigned_to = ?, assigned_by = ?, status = ?,
                    priority = ?, category = ?, due_date = ?, document = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    task.title,
                    task.description,
                    task.assigned_to,
                    task.assigned_by,
                    task.status.value,
                    task.priority.value,
                    task.category.value,
                    data["due_date"],
                    json.dumps(data),
                    data["updated_at"],
                    task.id,
                ),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Task not found")
        return task

    def delete(self, task_id: str) -> bool:
        with self._db.write() as conn:
            cursor = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        return cursor.rowcount > 0

    def find_by_id(self, task_id: str) -> Optional[Task]:
        with self._db.read() as conn:
            row = conn.execute("SELECT id, document FROM tasks WHERE id = ?", (task_id,)).fetchone()
        return self._row_to_task(row) if row else None

    def find_all(
        self,
        *,
        project: Optional[str] = None,
        assigned_to: Optional[str] = None,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        category: Optional[TaskCategory] = None,
        search: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Tuple[List[Task], int]:
        clauses: List[str] = []
        params: List[Any] = []
        if project:
            clauses.append("project = ?")
            params.append(project)
        if assigned_to:
            clauses.append("assigned_to = ?")
            params.append(assigned_to)
        if status:
            clauses.append("status = ?")
            params.append(TaskStatus(status).value)
        if priority:
            clauses.append("priority = ?")
            params.append(TaskPriority(priority).value)
        if category:
            clauses.append("category = ?")
            params.append(TaskCategory(category).value)
        if search:
            clauses.append("(title LIKE ? OR description LIKE ?)")
            params.extend([f"%{search}%", f"%{search}%"])
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with self._db.read() as conn:
            total = conn.execute(f"SELECT COUNT(*) FROM tasks {where}", params).fetchone()[0]
            rows = conn.execute(
                f"SELECT id, document FROM tasks {where} ORDER BY created_at DESC LIMIT ? OFFSET ?",
                [*params, limit, offset],
            ).fetchall()
        return [self._row_to_task(row) for row in rows], total

    def find_by_project(self, project_id: str) -> List[Task]:
        return self._select("WHERE project = ?", (project_id,))

    def find_by_assignee(self, user_id: str) -> List[Task]:
        return self._select("WHERE assigned_to = ?", (user_id,))

    def find_overdue(self, now: Optional[datetime] = None) -> List[Task]:
        now = now or utcnow()
        return self._select(
            "WHERE due_date IS NOT NULL AND due_date < ? AND status IN (?, ?)",
            (now.isoformat(), *_OPEN_STATUSES),
        )

    def find_due_soon(self, days: int, now: Optional[datetime] = None) -> List[Task]:
        now = now or utcnow()
        horizon = now + timedelta(days=days)
        return self._select(
            "WHERE due_date IS NOT NULL AND due_date >= ? AND due_date <= ? AND status IN (?, ?)",
            (now.isoformat(), horizon.isoformat(), *_OPEN_STATUSES),
        )

    def count(self) -> int:
        with self._db.read() as conn:
            return conn.execute("SELECT COUNT(*) FROM tasks").fetchone()[0]

    def count_by_status(self) -> Dict[str, int]:
        return self._group_count("status", TaskStatus)

    def count_by_priority(self) -> Dict[str, int]:
        return self._group_count("priority", TaskPriority)

    def completion_rate(self, user_id: Optional[str] = None) -> float:
        """Percentage of tasks completed, optionally for one assignee."""
        where = "WHERE assigned_to = ?" if user_id else ""
        params = (user_id,) if user_id else ()
        with self._db.read() as conn:
            row = conn.execute(
                f"""
                SELECT COUNT(*) AS total,
                       SUM(CASE WHEN status = 'completed' THEN 1 ELSE 0 END) AS completed
                FROM tasks {where}
                """,
                params,
            ).fetchone()
        if not row["total"]:
            return 0.0
        return row["completed"] / row["total"] * 100

    def _group_count(self, column: str, enum_type) -> Dict[str, int]:
        counts = {item.value: 0 for item in enum_type}
        with self._db.read() as conn:
            rows = conn.execute(f"SELECT {column} AS key, COUNT(*) AS total FROM tasks GROUP BY {column}").fetchall()
        counts.update({row["key"]: row["total"] for row in rows})
        return counts

    def _select(self, where: str, params: tuple) -> List[Task]:
        with self._db.read() as conn:
            rows = conn.execute(
                f"SELECT id, document FROM tasks {where} ORDER BY created_at DESC", params
            ).fetchall()
        return [self._row_to_task(row) for row in rows]

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        data: Dict[str, Any] = json.loads(row["document"])
        data["id"] = row["id"]
        return Task.from_persistence(data)
