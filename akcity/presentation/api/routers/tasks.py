from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ....application.services.task_service import TaskService
from ....core.dependencies import get_task_service
from ....domain.models import Task, TaskCategory, TaskPriority, TaskStatus, User
from ..dependencies import require_permission
from ..responses import envelope
from ..schemas.task import (
    TaskAssignPayload,
    TaskAttachmentPayload,
    TaskCreatePayload,
    TaskHoursPayload,
    TaskLocationPayload,
    TaskTagPayload,
    TaskUpdatePayload,
)

router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


def _task_view(task: Task) -> Dict[str, Any]:
    data = task.to_dict()
    data["is_overdue"] = task.is_overdue()
    data["is_urgent"] = task.is_urgent()
    data["days_remaining"] = task.days_remaining()
    data["progress_percentage"] = task.progress_percentage()
    return data


async def _load_for_work(service: TaskService, task_id: str, user: User) -> Task:
    """Assignees may work on their own tasks without holding ``task:write``."""
    task = await service.get_task(task_id)
    if task.assigned_to != user.id and not user.has_permission("task:write"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
    return task


@router.get("")
async def list_tasks(
    project: Optional[str] = None,
    assigned_to: Optional[str] = None,
    status_filter: Optional[TaskStatus] = Query(default=None, alias="status"),
    priority: Optional[TaskPriority] = None,
    category: Optional[TaskCategory] = None,
    search: Optional[str] = None,
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    service: TaskService = Depends(get_task_service),
    _: User = Depends(require_permission("task:read")),
) -> Dict[str, Any]:
    tasks, total = await service.list_tasks(
        project=project,
        assigned_to=assigned_to,
        status=status_filter,
        priority=priority,
        category=category,
        search=search,
        limit=limit,
        offset=offset,
    )
    return envelope(
        {"items": [_task_view(task) for task in tasks], "total": total, "limit": limit, "offset": offset}
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: TaskCreatePayload,
    service: TaskService = Depends(get_task_service),
    user: User = Depends(require_permission("task:write")),
) -> Dict[str, Any]:
    task = await service.create_task(
        title=payload.title,
        description=payload.description,
        project=payload.project,
        assigned_to=payload.assigned_to,
        assigned_by=user.id,
        priority=payload.priority,
        category=payload.category,
        due_date=payload.due_date,
        estimated_hours=payload.estimated_hours,
        tags=payload.tags,
        location=payload.location.model_dump() if payload.location else None,
    )
    return envelope(_task_view(task), "Task created successfully")


@router.get("/overdue")
async def overdue_tasks(
    service: TaskService = Depends(get_task_service),
    _: User = Depends(require_permission("task:read")),
) -> Dict[str, Any]:
    return envelope([_task_view(task) for task in await service.overdue_tasks()])


@router.get("/due-soon")
async def tasks_due_soon(
    days: int = Query(default=3, ge=0, le=90),
    service: TaskService = Depends(get_task_service),
    _: User = Depends(require_permission("task:read")),
) -> Dict[str, Any]:
    return envelope([_task_view(task) for task in await service.tasks_due_soon(days)])


@router.get("/stats")
async def task_statistics(
    user_id: Optional[str] = None,
    service: TaskService = Depends(get_task_service),
    _: User = Depends(require_permission("report:read")),
) -> Dict[str, Any]:
    return envelope(await service.statistics(user_id))


@router.get("/{task_id}")
async def get_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
    _: User = Depends(require_permission("task:read")),
) -> Dict[str, Any]:
    return envelope(_task_view(await service.get_task(task_id)))


@router.patch("/{task_id}")
async def update_task(
    task_id: str,
    payload: TaskUpdatePayload,
    service: TaskService = Depends(get_task_service),
    _: User = Depends(require_permission("task:write")),
) -> Dict[str, Any]:
    task = await service.update_task(task_id, **payload.model_dump(exclude_unset=True))
    return envelope(_task_view(task), "Task updated successfully")


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
    _: User = Depends(require_permission("task:delete")),
) -> Dict[str, Any]:
    await service.delete_task(task_id)
    return envelope(message="Task deleted successfully")


@router.post("/{task_id}/assign")
async def reassign_task(
    task_id: str,
    payload: TaskAssignPayload,
    service: TaskService = Depends(get_task_service),
    user: User = Depends(require_permission("task:write")),
) -> Dict[str, Any]:
    task = await service.reassign_task(task_id, payload.assigned_to, user.id)
    return envelope(_task_view(task), "Task reassigned")


@router.post("/{task_id}/start")
async def start_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
    user: User = Depends(require_permission("task:read")),
) -> Dict[str, Any]:
    await _load_for_work(service, task_id, user)
    return envelope(_task_view(await service.start_task(task_id)), "Task started")


@router.post("/{task_id}/complete")
async def complete_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
    user: User = Depends(require_permission("task:read")),
) -> Dict[str, Any]:
    await _load_for_work(service, task_id, user)
    return envelope(_task_view(await service.complete_task(task_id)), "Task completed")


@router.post("/{task_id}/cancel")
async def cancel_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
    _: User = Depends(require_permission("task:write")),
) -> Dict[str, Any]:
    return envelope(_task_view(await service.cancel_task(task_id)), "Task cancelled")


@router.post("/{task_id}/hours")
async def log_hours(
    task_id: str,
    payload: TaskHoursPayload,
    service: TaskService = Depends(get_task_service),
    user: User = Depends(require_permission("task:read")),
) -> Dict[str, Any]:
    await _load_for_work(service, task_id, user)
    return envelope(_task_view(await service.log_hours(task_id, payload.hours)), "Hours logged")


@router.put("/{task_id}/location")
async def update_location(
    task_id: str,
    payload: TaskLocationPayload,
    service: TaskService = Depends(get_task_service),
    _: User = Depends(require_permission("task:write")),
) -> Dict[str, Any]:
    task = await service.update_location(task_id, **payload.model_dump(exclude_unset=True))
    return envelope(_task_view(task), "Location updated")


@router.post("/{task_id}/tags")
async def add_tag(
    task_id: str,
    payload: TaskTagPayload,
    service: TaskService = Depends(get_task_service),
    _: User = Depends(require_permission("task:write")),
) -> Dict[str, Any]:
    return envelope(_task_view(await service.add_tag(task_id, payload.tag)), "Tag added")


@router.delete("/{task_id}/tags/{tag}")
async def remove_tag(
    task_id: str,
    tag: str,
    service: TaskService = Depends(get_task_service),
    _: User = Depends(require_permission("task:write")),
) -> Dict[str, Any]:
    return envelope(_task_view(await service.remove_tag(task_id, tag)), "Tag removed")


@router.post("/{task_id}/attachments", status_code=status.HTTP_201_CREATED)
async def add_attachment(
    task_id: str,
    payload: TaskAttachmentPayload,
    service: TaskService = Depends(get_task_service),
    user: User = Depends(require_permission("task:read")),
) -> Dict[str, Any]:
    await _load_for_work(service, task_id, user)
    task = await service.add_attachment(
        task_id,
        name=payload.name,
        url=payload.url,
        type=payload.type,
        size=payload.size,
        uploaded_by=user.id,
    )
    return envelope(_task_view(task), "Attachment added")


@router.delete("/{task_id}/attachments/{attachment_id}")
async def remove_attachment(
    task_id: str,
    attachment_id: str,
    service: TaskService = Depends(get_task_service),
    _: User = Depends(require_permission("task:write")),
) -> Dict[str, Any]:
    task = await service.remove_attachment(task_id, attachment_id)
    return envelope(_task_view(task), "Attachment removed")
