from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from ...domain.errors import NotFoundError
from ...domain.models import Task, TaskCategory, TaskLocation, TaskPriority, TaskStatus
from ...domain.ports.persistence import ProjectRepository, TaskRepository, UserRepository

logger = logging.getLogger(__name__)


class TaskService:
    """Coordinates task assignment, lifecycle transitions and bookkeeping."""

    def __init__(
        self,
        task_repository: TaskRepository,
        project_repository: ProjectRepository,
        user_repository: UserRepository,
    ) -> None:
        self._tasks = task_repository
        self._projects = project_repository
        self._users = user_repository

    # Queries --------------------------------------------------------------
    async def get_task(self, task_id: str) -> Task:
        task = self._tasks.find_by_id(task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")
        return task

    async def list_tasks(
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
        return self._tasks.find_all(
            project=project,
            assigned_to=assigned_to,
            status=status,
            priority=priority,
            category=category,
            search=search,
            limit=limit,
            offset=offset,
        )

    async def overdue_tasks(self) -> List[Task]:
        return self._tasks.find_overdue()

    async def tasks_due_soon(self, days: int = 3) -> List[Task]:
        return self._tasks.find_due_soon(days)

    async def statistics(self, user_id: Optional[str] = None) -> Dict[str, Any]:
        return {
            "total": self._tasks.count(),
            "by_status": self._tasks.count_by_status(),
            "by_priority": self._tasks.count_by_priority(),
            "completion_rate": round(self._tasks.completion_rate(user_id), 2),
        }

    # CRUD operations ------------------------------------------------------
    async def create_task(
        self,
        *,
        title: str,
        description: str,
        project: str,
        assigned_to: str,
        assigned_by: str,
        priority: TaskPriority = TaskPriority.MEDIUM,
        category: TaskCategory = TaskCategory.OTHER,
        due_date: Optional[datetime] = None,
        estimated_hours: Optional[float] = None,
        tags: Optional[List[str]] = None,
        location: Optional[Mapping[str, Any]] = None,
    ) -> Task:
        if self._projects.find_by_id(project) is None:
            raise NotFoundError(f"Project {project} not found")
        if self._users.find_by_id(assigned_to) is None:
            raise NotFoundError(f"User {assigned_to} not found")

        task = Task.create(
            title=title,
            description=description,
            project=project,
            assigned_to=assigned_to,
            assigned_by=assigned_by,
            priority=priority,
            category=category,
            due_date=due_date,
            estimated_hours=estimated_hours,
            tags=tags,
            location=TaskLocation.from_dict(location),
        )
        created = self._tasks.create(task)
        logger.info("Created task %s in project %s", created.id, project)
        return created

    async def update_task(self, task_id: str, **changes: Any) -> Task:
        return await self._mutate(task_id, lambda task: task.update_basic_info(**changes))

    async def reassign_task(self, task_id: str, assigned_to: str, assigned_by: str) -> Task:
        if self._users.find_by_id(assigned_to) is None:
            raise NotFoundError(f"User {assigned_to} not found")
        return await self._mutate(task_id, lambda task: task.reassign(assigned_to, assigned_by))

    async def delete_task(self, task_id: str) -> None:
        if not self._tasks.delete(task_id):
            raise NotFoundError(f"Task {task_id} not found")

    # Lifecycle ------------------------------------------------------------
    async def start_task(self, task_id: str) -> Task:
        return await self._mutate(task_id, lambda task: task.start())

    async def complete_task(self, task_id: str) -> Task:
        return await self._mutate(task_id, lambda task: task.complete())

    async def cancel_task(self, task_id: str) -> Task:
        return await self._mutate(task_id, lambda task: task.cancel())

    # Bookkeeping ----------------------------------------------------------
    async def log_hours(self, task_id: str, hours: float) -> Task:
        return await self._mutate(task_id, lambda task: task.update_actual_hours(hours))

    async def add_tag(self, task_id: str, tag: str) -> Task:
        return await self._mutate(task_id, lambda task: task.add_tag(tag))

    async def remove_tag(self, task_id: str, tag: str) -> Task:
        return await self._mutate(task_id, lambda task: task.remove_tag(tag))

    async def update_location(self, task_id: str, **changes: Optional[str]) -> Task:
        return await self._mutate(task_id, lambda task: task.update_location(**changes))

    async def add_attachment(
        self, task_id: str, *, name: str, url: str, type: str, size: int, uploaded_by: str
    ) -> Task:
        return await self._mutate(
            task_id,
            lambda task: task.add_attachment(name=name, url=url, type=type, size=size, uploaded_by=uploaded_by),
        )

    async def remove_attachment(self, task_id: str, attachment_id: str) -> Task:
        task = await self.get_task(task_id)
        if not task.remove_attachment(attachment_id):
            raise NotFoundError(f"Attachment {attachment_id} not found")
        return self._tasks.update(task)

    async def _mutate(self, task_id: str, change: Callable[[Task], Any]) -> Task:
        task = await self.get_task(task_id)
        change(task)
        return self._tasks.update(task)
