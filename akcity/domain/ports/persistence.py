from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Protocol, Tuple

from ..models import Project, ProjectStatus, Task, TaskCategory, TaskPriority, TaskStatus, User, UserRole, UserStatus


class UserRepository(Protocol):
    """Persistence functions related to user accounts."""

    def create(self, user: User) -> User:
        ...

    def update(self, user: User) -> User:
        ...

    def delete(self, user_id: str) -> bool:
        ...

    def find_by_id(self, user_id: str) -> Optional[User]:
        ...

    def find_by_email(self, email: str) -> Optional[User]:
        ...

    def find_all(
        self,
        *,
        role: Optional[UserRole] = None,
        status: Optional[UserStatus] = None,
        search: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Tuple[List[User], int]:
        ...

    def find_by_role(self, role: UserRole) -> List[User]:
        ...

    def add_to_project(self, user_id: str, project_id: str) -> None:
        ...

    def remove_from_project(self, user_id: str, project_id: str) -> None:
        ...

    def count(self) -> int:
        ...

    def count_by_role(self) -> Dict[str, int]:
        ...

    def count_by_status(self) -> Dict[str, int]:
        ...


class ProjectRepository(Protocol):
    """Persistence functions related to construction projects."""

    def create(self, project: Project) -> Project:
        ...

    def update(self, project: Project) -> Project:
        ...

    def delete(self, project_id: str) -> bool:
        ...

    def find_by_id(self, project_id: str) -> Optional[Project]:
        ...

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
        ...

    def find_by_manager(self, manager_id: str) -> List[Project]:
        ...

    def find_by_team_member(self, user_id: str) -> List[Project]:
        ...

    def find_overdue(self, now: Optional[datetime] = None) -> List[Project]:
        ...

    def count(self) -> int:
        ...

    def count_by_status(self) -> Dict[str, int]:
        ...


class TaskRepository(Protocol):
    """Persistence functions related to project tasks."""

    def create(self, task: Task) -> Task:
        ...

    def update(self, task: Task) -> Task:
        ...

    def delete(self, task_id: str) -> bool:
        ...

    def find_by_id(self, task_id: str) -> Optional[Task]:
        ...

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
        ...

    def find_by_project(self, project_id: str) -> List[Task]:
        ...

    def find_by_assignee(self, user_id: str) -> List[Task]:
        ...

    def find_overdue(self, now: Optional[datetime] = None) -> List[Task]:
        ...

    def find_due_soon(self, days: int, now: Optional[datetime] = None) -> List[Task]:
        ...

    def count(self) -> int:
        ...

    def count_by_status(self) -> Dict[str, int]:
        ...

    def count_by_priority(self) -> Dict[str, int]:
        ...

    def completion_rate(self, user_id: Optional[str] = None) -> float:
        ...
