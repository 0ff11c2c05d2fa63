from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ....domain.models import TaskCategory, TaskPriority


class TaskLocationPayload(BaseModel):
    block: Optional[str] = None
    floor: Optional[str] = None
    apartment: Optional[str] = None


class TaskCreatePayload(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    project: str = Field(..., min_length=1)
    assigned_to: str = Field(..., min_length=1)
    priority: TaskPriority = TaskPriority.MEDIUM
    category: TaskCategory = TaskCategory.OTHER
    due_date: Optional[datetime] = None
    estimated_hours: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    tags: List[str] = Field(default_factory=list)
    location: Optional[TaskLocationPayload] = None


class TaskUpdatePayload(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    category: Optional[TaskCategory] = None
    due_date: Optional[datetime] = None
    estimated_hours: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)


class TaskAssignPayload(BaseModel):
    assigned_to: str = Field(..., min_length=1)


class TaskHoursPayload(BaseModel):
    hours: float = Field(..., ge=0, allow_inf_nan=False)


class TaskTagPayload(BaseModel):
    tag: str = Field(..., min_length=1, max_length=50)


class TaskAttachmentPayload(BaseModel):
    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    size: int = Field(..., ge=0)
