from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from ...domain.errors import NotFoundError
from ...domain.models import BuildingInfo, ClientInfo, Project, ProjectStatus
from ...domain.ports.persistence import ProjectRepository, UserRepository

logger = logging.getLogger(__name__)


class ProjectService:
    """Coordinates project lifecycle, team membership and documents."""

    def __init__(self, project_repository: ProjectRepository, user_repository: UserRepository) -> None:
        self._projects = project_repository
        self._users = user_repository

    # Queries --------------------------------------------------------------
    async def get_project(self, project_id: str) -> Project:
        project = self._projects.find_by_id(project_id)
        if project is None:
            raise NotFoundError(f"Project {project_id} not found")
        return project

    async def list_projects(
        self,
        *,
        status: Optional[ProjectStatus] = None,
        project_manager: Optional[str] = None,
        team_member: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Tuple[List[Project], int]:
        return self._projects.find_all(
            status=status,
            project_manager=project_manager,
            team_member=team_member,
            search=search,
            limit=limit,
            offset=offset,
        )

    async def statistics(self) -> Dict[str, Any]:
        return {
            "total": self._projects.count(),
            "by_status": self._projects.count_by_status(),
            "overdue": len(self._projects.find_overdue()),
        }

    # CRUD operations ------------------------------------------------------
    async def create_project(
        self,
        *,
        name: str,
        description: str,
        location: str,
        start_date: datetime,
        end_date: datetime,
        building_info: Mapping[str, Any],
        client: Mapping[str, Any],
        project_manager: str,
        team: Optional[List[str]] = None,
    ) -> Project:
        self._require_user(project_manager, "Project manager")
        members = list(dict.fromkeys(team or []))
        for member in members:
            self._require_user(member, "Team member")

        project = Project.create(
            name=name,
            description=description,
            location=location,
            start_date=start_date,
            end_date=end_date,
            project_manager=project_manager,
            building_info=BuildingInfo.from_dict(building_info),
            client=ClientInfo.from_dict(client),
            team=members,
        )
        created = self._projects.create(project)
        for member in created.team:
            self._users.add_to_project(member, created.id)
        logger.info("Created project %s (%s)", created.id, created.name)
        return created

    async def update_project(self, project_id: str, **changes: Any) -> Project:
        return await self._mutate(project_id, lambda project: project.update_basic_info(**changes))

    async def update_building_info(self, project_id: str, **changes: Any) -> Project:
        return await self._mutate(project_id, lambda project: project.update_building_info(**changes))

    async def update_client(self, project_id: str, **changes: Any) -> Project:
        return await self._mutate(project_id, lambda project: project.update_client(**changes))

    async def update_progress(self, project_id: str, progress: float) -> Project:
        return await self._mutate(project_id, lambda project: project.update_progress(progress))

    async def change_status(self, project_id: str, status: ProjectStatus) -> Project:
        project = await self._mutate(project_id, lambda item: item.update_status(status))
        logger.info("Project %s moved to %s", project_id, project.status.value)
        return project

    async def complete_project(self, project_id: str) -> Project:
        return await self.change_status(project_id, ProjectStatus.COMPLETED)

    async def delete_project(self, project_id: str) -> None:
        project = await self.get_project(project_id)
        for member in project.team:
            self._remove_membership(member, project_id)
        self._projects.delete(project_id)
        logger.info("Deleted project %s", project_id)

    # Team -----------------------------------------------------------------
    async def add_team_member(self, project_id: str, user_id: str) -> Project:
        self._require_user(user_id, "User")
        project = await self.get_project(project_id)
        if project.add_team_member(user_id):
            self._projects.update(project)
            self._users.add_to_project(user_id, project_id)
        return project

    async def remove_team_member(self, project_id: str, user_id: str) -> Project:
        project = await self.get_project(project_id)
        if project.remove_team_member(user_id):
            self._projects.update(project)
            self._remove_membership(user_id, project_id)
        return project

    # Documents ------------------------------------------------------------
    async def add_document(self, project_id: str, *, name: str, url: str, type: str, size: int) -> Project:
        return await self._mutate(
            project_id, lambda project: project.add_document(name=name, url=url, type=type, size=size)
        )

    async def remove_document(self, project_id: str, name: str) -> Project:
        project = await self.get_project(project_id)
        if not project.remove_document(name):
            raise NotFoundError(f"Document {name} not found")
        return self._projects.update(project)

    # Helpers --------------------------------------------------------------
    async def _mutate(self, project_id: str, change: Callable[[Project], Any]) -> Project:
        project = await self.get_project(project_id)
        change(project)
        return self._projects.update(project)

    def _require_user(self, user_id: str, label: str) -> None:
        if self._users.find_by_id(user_id) is None:
            raise NotFoundError(f"{label} {user_id} not found")

    def _remove_membership(self, user_id: str, project_id: str) -> None:
        try:
            self._users.remove_from_project(user_id, project_id)
        except NotFoundError:
            logger.warning("User %s vanished before leaving project %s", user_id, project_id)
