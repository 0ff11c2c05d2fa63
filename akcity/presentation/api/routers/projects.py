from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from ....application.services.project_service import ProjectService
from ....core.dependencies import get_project_service
from ....domain.models import Project, ProjectStatus, User
from ..dependencies import require_permission
from ..responses import envelope
from ..schemas.project import (
    BuildingInfoUpdatePayload,
    ClientUpdatePayload,
    DocumentPayload,
    ProjectCreatePayload,
    ProjectProgressPayload,
    ProjectStatusPayload,
    ProjectUpdatePayload,
    TeamMemberPayload,
)

router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


def _project_view(project: Project) -> Dict[str, Any]:
    data = project.to_dict()
    data["is_overdue"] = project.is_overdue()
    data["days_remaining"] = project.days_remaining()
    data["can_be_completed"] = project.can_be_completed()
    return data


@router.get("")
async def list_projects(
    status_filter: Optional[ProjectStatus] = Query(default=None, alias="status"),
    project_manager: Optional[str] = None,
    team_member: Optional[str] = None,
    search: Optional[str] = None,
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    service: ProjectService = Depends(get_project_service),
    _: User = Depends(require_permission("project:read")),
) -> Dict[str, Any]:
    projects, total = await service.list_projects(
        status=status_filter,
        project_manager=project_manager,
        team_member=team_member,
        search=search,
        limit=limit,
        offset=offset,
    )
    return envelope(
        {
            "items": [_project_view(project) for project in projects],
            "total": total,
            "limit": limit,
            "offset": offset,
        }
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: ProjectCreatePayload,
    service: ProjectService = Depends(get_project_service),
    user: User = Depends(require_permission("project:write")),
) -> Dict[str, Any]:
    project = await service.create_project(
        name=payload.name,
        description=payload.description,
        location=payload.location,
        start_date=payload.start_date,
        end_date=payload.end_date,
        building_info=payload.building_info.model_dump(),
        client=payload.client.model_dump(),
        project_manager=payload.project_manager or user.id,
        team=payload.team,
    )
    return envelope(_project_view(project), "Project created successfully")


@router.get("/stats")
async def project_statistics(
    service: ProjectService = Depends(get_project_service),
    _: User = Depends(require_permission("report:read")),
) -> Dict[str, Any]:
    return envelope(await service.statistics())


@router.get("/{project_id}")
async def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
    _: User = Depends(require_permission("project:read")),
) -> Dict[str, Any]:
    return envelope(_project_view(await service.get_project(project_id)))


@router.patch("/{project_id}")
async def update_project(
    project_id: str,
    payload: ProjectUpdatePayload,
    service: ProjectService = Depends(get_project_service),
    _: User = Depends(require_permission("project:write")),
) -> Dict[str, Any]:
    project = await service.update_project(project_id, **payload.model_dump(exclude_unset=True))
    return envelope(_project_view(project), "Project updated successfully")


@router.patch("/{project_id}/building-info")
async def update_building_info(
    project_id: str,
    payload: BuildingInfoUpdatePayload,
    service: ProjectService = Depends(get_project_service),
    _: User = Depends(require_permission("project:write")),
) -> Dict[str, Any]:
    project = await service.update_building_info(project_id, **payload.model_dump(exclude_none=True))
    return envelope(_project_view(project), "Building information updated")


@router.patch("/{project_id}/client")
async def update_client(
    project_id: str,
    payload: ClientUpdatePayload,
    service: ProjectService = Depends(get_project_service),
    _: User = Depends(require_permission("project:write")),
) -> Dict[str, Any]:
    project = await service.update_client(project_id, **payload.model_dump(exclude_none=True))
    return envelope(_project_view(project), "Client information updated")


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
    _: User = Depends(require_permission("project:delete")),
) -> Dict[str, Any]:
    await service.delete_project(project_id)
    return envelope(message="Project deleted successfully")


@router.post("/{project_id}/progress")
async def update_progress(
    project_id: str,
    payload: ProjectProgressPayload,
    service: ProjectService = Depends(get_project_service),
    _: User = Depends(require_permission("project:write")),
) -> Dict[str, Any]:
    project = await service.update_progress(project_id, payload.progress)
    return envelope(_project_view(project), "Progress updated")


@router.post("/{project_id}/status")
async def change_status(
    project_id: str,
    payload: ProjectStatusPayload,
    service: ProjectService = Depends(get_project_service),
    _: User = Depends(require_permission("project:write")),
) -> Dict[str, Any]:
    project = await service.change_status(project_id, payload.status)
    return envelope(_project_view(project), "Status updated")


@router.post("/{project_id}/complete")
async def complete_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
    _: User = Depends(require_permission("project:write")),
) -> Dict[str, Any]:
    project = await service.complete_project(project_id)
    return envelope(_project_view(project), "Project completed")


@router.post("/{project_id}/team")
async def add_team_member(
    project_id: str,
    payload: TeamMemberPayload,
    service: ProjectService = Depends(get_project_service),
    _: User = Depends(require_permission("project:write")),
) -> Dict[str, Any]:
    project = await service.add_team_member(project_id, payload.user_id)
    return envelope(_project_view(project), "Team member added")


@router.delete("/{project_id}/team/{user_id}")
async def remove_team_member(
    project_id: str,
    user_id: str,
    service: ProjectService = Depends(get_project_service),
    _: User = Depends(require_permission("project:write")),
) -> Dict[str, Any]:
    project = await service.remove_team_member(project_id, user_id)
    return envelope(_project_view(project), "Team member removed")


@router.post("/{project_id}/documents", status_code=status.HTTP_201_CREATED)
async def add_document(
    project_id: str,
    payload: DocumentPayload,
    service: ProjectService = Depends(get_project_service),
    _: User = Depends(require_permission("document:write")),
) -> Dict[str, Any]:
    project = await service.add_document(
        project_id, name=payload.name, url=payload.url, type=payload.type, size=payload.size
    )
    return envelope(_project_view(project), "Document added")


@router.delete("/{project_id}/documents/{name}")
async def remove_document(
    project_id: str,
    name: str,
    service: ProjectService = Depends(get_project_service),
    _: User = Depends(require_permission("document:write")),
) -> Dict[str, Any]:
    project = await service.remove_document(project_id, name)
    return envelope(_project_view(project), "Document removed")
