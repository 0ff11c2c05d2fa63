"""Task domain model: work items assigned within a construction project."""

from __future__ import annotations

import math
import uuid
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from ..clock import ensure_utc, format_datetime, parse_datetime, utcnow
from ..errors import InvalidTransitionError, ValidationError


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskCategory(str, Enum):
    CONSTRUCTION = "construction"
    ELECTRICAL = "electrical"
    PLUMBING = "plumbing"
    PAINTING = "painting"
    CLEANING = "cleaning"
    OTHER = "other"


@dataclass(slots=True)
class TaskLocation:
    block: Optional[str] = None
    floor: Optional[str] = None
    apartment: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "TaskLocation":
        data = data or {}
        return cls(block=data.get("block"), floor=data.get("floor"), apartment=data.get("apartment"))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class TaskAttachment:
    name: str
    url: str
    type: str
    size: int
    uploaded_by: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    uploaded_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TaskAttachment":
        return cls(
            id=data["id"],
            name=data["name"],
            url=data["url"],
            type=data["type"],
            size=data["size"],
            uploaded_by=data["uploaded_by"],
            uploaded_at=parse_datetime(data.get("uploaded_at")) or utcnow(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "type": self.type,
            "size": self.size,
            "uploaded_by": self.uploaded_by,
            "uploaded_at": format_datetime(self.uploaded_at),
        }


@dataclass(slots=True)
class Task:
    title: str
    description: str
    project: str
    assigned_to: str
    assigned_by: str
    priority: TaskPriority = TaskPriority.MEDIUM
    category: TaskCategory = TaskCategory.OTHER
    status: TaskStatus = TaskStatus.PENDING
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    estimated_hours: Optional[float] = None
    actual_hours: float = 0
    tags: List[str] = field(default_factory=list)
    location: TaskLocation = field(default_factory=TaskLocation)
    attachments: List[TaskAttachment] = field(default_factory=list)
    id: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        try:
            self.priority = TaskPriority(self.priority)
            self.category = TaskCategory(self.category)
            self.status = TaskStatus(self.status)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        if not self.title or not self.title.strip():
            raise ValidationError("Task title is required")
        _check_hours("actual_hours", self.actual_hours)
        if self.estimated_hours is not None:
            _check_hours("estimated_hours", self.estimated_hours)
        self.due_date = ensure_utc(self.due_date)
        self.completed_at = ensure_utc(self.completed_at)
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at)
        self.tags = list(dict.fromkeys(self.tags))

    @classmethod
    def create(
        cls,
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
        location: Optional[TaskLocation] = None,
    ) -> "Task":
        now = utcnow()
        return cls(
            title=title.strip(),
            description=description,
            project=project,
            assigned_to=assigned_to,
            assigned_by=assigned_by,
            priority=priority,
            category=category,
            due_date=due_date,
            estimated_hours=estimated_hours,
            tags=list(tags or []),
            location=location or TaskLocation(),
            status=TaskStatus.PENDING,
            actual_hours=0,
            attachments=[],
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def from_persistence(cls, data: Dict[str, Any]) -> "Task":
        return cls(
            id=data.get("id"),
            title=data["title"],
            description=data.get("description", ""),
            project=data["project"],
            assigned_to=data["assigned_to"],
            assigned_by=data["assigned_by"],
            priority=data.get("priority", TaskPriority.MEDIUM),
            category=data.get("category", TaskCategory.OTHER),
            status=data.get("status", TaskStatus.PENDING),
            due_date=parse_datetime(data.get("due_date")),
            completed_at=parse_datetime(data.get("completed_at")),
            estimated_hours=data.get("estimated_hours"),
            actual_hours=data.get("actual_hours", 0),
            tags=list(data.get("tags") or []),
            location=TaskLocation.from_dict(data.get("location")),
            attachments=[TaskAttachment.from_dict(item) for item in data.get("attachments") or []],
            created_at=parse_datetime(data.get("created_at")) or utcnow(),
            updated_at=parse_datetime(data.get("updated_at")) or utcnow(),
        )

    # Lifecycle ------------------------------------------------------------
    def start(self) -> None:
        if self.status is not TaskStatus.PENDING:
            raise InvalidTransitionError(
                "Only pending tasks can be started",
                current=self.status.value,
                target=TaskStatus.IN_PROGRESS.value,
            )
        self.status = TaskStatus.IN_PROGRESS
        self._touch()

    def complete(self) -> None:
        if self.status is not TaskStatus.IN_PROGRESS:
            raise InvalidTransitionError(
                "Only in-progress tasks can be completed",
                current=self.status.value,
                target=TaskStatus.COMPLETED.value,
            )
        now = utcnow()
        self.status = TaskStatus.COMPLETED
        self.completed_at = now
        self.updated_at = now

    def cancel(self) -> None:
        if self.status is TaskStatus.COMPLETED:
            raise InvalidTransitionError(
                "Completed tasks cannot be cancelled",
                current=self.status.value,
                target=TaskStatus.CANCELLED.value,
            )
        if self.status is TaskStatus.CANCELLED:
            raise InvalidTransitionError(
                "Task is already cancelled",
                current=self.status.value,
                target=TaskStatus.CANCELLED.value,
            )
        self.status = TaskStatus.CANCELLED
        self._touch()

    # Mutations ------------------------------------------------------------
    def update_basic_info(
        self,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        priority: Optional[TaskPriority] = None,
        category: Optional[TaskCategory] = None,
        due_date: Optional[datetime] = None,
        estimated_hours: Optional[float] = None,
    ) -> None:
        if estimated_hours is not None:
            _check_hours("estimated_hours", estimated_hours)
            self.estimated_hours = estimated_hours
        if title:
            self.title = title.strip()
        if description:
            self.description = description
        if priority:
            self.priority = TaskPriority(priority)
        if category:
            self.category = TaskCategory(category)
        if due_date:
            self.due_date = ensure_utc(due_date)
        self._touch()

    def reassign(self, assigned_to: str, assigned_by: str) -> None:
        self.assigned_to = assigned_to
        self.assigned_by = assigned_by
        self._touch()

    def update_actual_hours(self, hours: float) -> None:
        _check_hours("actual_hours", hours)
        self.actual_hours = hours
        self._touch()

    def add_tag(self, tag: str) -> bool:
        tag = tag.strip()
        if not tag or tag in self.tags:
            return False
        self.tags.append(tag)
        self._touch()
        return True

    def remove_tag(self, tag: str) -> bool:
        if tag not in self.tags:
            return False
        self.tags = [item for item in self.tags if item != tag]
        self._touch()
        return True

    def update_location(self, **changes: Optional[str]) -> None:
        self.location = replace(self.location, **changes)
        self._touch()

    def add_attachment(self, *, name: str, url: str, type: str, size: int, uploaded_by: str) -> TaskAttachment:
        attachment = TaskAttachment(name=name, url=url, type=type, size=size, uploaded_by=uploaded_by)
        self.attachments.append(attachment)
        self._touch()
        return attachment

    def remove_attachment(self, attachment_id: str) -> bool:
        remaining = [item for item in self.attachments if item.id != attachment_id]
        if len(remaining) == len(self.attachments):
            return False
        self.attachments = remaining
        self._touch()
        return True

    # Queries --------------------------------------------------------------
    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        if self.due_date is None or self.status in (TaskStatus.COMPLETED, TaskStatus.CANCELLED):
            return False
        return (now or utcnow()) > self.due_date

    def days_remaining(self, now: Optional[datetime] = None) -> Optional[int]:
        if self.due_date is None:
            return None
        now = now or utcnow()
        return math.ceil((self.due_date - now).total_seconds() / 86400)

    def is_urgent(self, now: Optional[datetime] = None) -> bool:
        """Urgent priority, or due within a day. No due date means not urgent by date."""
        if self.priority is TaskPriority.URGENT:
            return True
        remaining = self.days_remaining(now)
        return remaining is not None and remaining <= 1

    def progress_percentage(self) -> float:
        if self.status is TaskStatus.COMPLETED:
            return 100
        if self.status in (TaskStatus.PENDING, TaskStatus.CANCELLED):
            return 0
        if self.estimated_hours and self.actual_hours > 0:
            return min(self.actual_hours / self.estimated_hours * 100, 100)
        # in progress without an estimate
        return 50

    def _touch(self) -> None:
        self.updated_at = utcnow()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "project": self.project,
            "assigned_to": self.assigned_to,
            "assigned_by": self.assigned_by,
            "priority": self.priority.value,
            "status": self.status.value,
            "category": self.category.value,
            "due_date": format_datetime(self.due_date),
            "completed_at": format_datetime(self.completed_at),
            "estimated_hours": self.estimated_hours,
            "actual_hours": self.actual_hours,
            "tags": list(self.tags),
            "location": self.location.to_dict(),
            "attachments": [item.to_dict() for item in self.attachments],
            "created_at": format_datetime(self.created_at),
            "updated_at": format_datetime(self.updated_at),
        }

    to_persistence = to_dict


def _check_hours(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be a finite number")
    if value < 0:
        raise ValidationError(f"{name} cannot be negative")
