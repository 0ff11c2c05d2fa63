"""Construction project domain model and its status state machine."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from ..clock import ensure_utc, format_datetime, parse_datetime, utcnow
from ..errors import InvalidTransitionError, ValidationError


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SUSPENDED = "suspended"
    CANCELLED = "cancelled"


class ConstructionType(str, Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"
    INFRASTRUCTURE = "infrastructure"


# Completion is reachable only through Project.complete(), which adds the progress guard.
PROJECT_TRANSITIONS: Mapping[ProjectStatus, FrozenSet[ProjectStatus]] = {
    ProjectStatus.PLANNING: frozenset(
        {ProjectStatus.IN_PROGRESS, ProjectStatus.SUSPENDED, ProjectStatus.CANCELLED}
    ),
    ProjectStatus.IN_PROGRESS: frozenset(
        {ProjectStatus.COMPLETED, ProjectStatus.SUSPENDED, ProjectStatus.CANCELLED}
    ),
    ProjectStatus.COMPLETED: frozenset(),
    ProjectStatus.SUSPENDED: frozenset(),
    ProjectStatus.CANCELLED: frozenset(),
}


@dataclass(slots=True)
class BuildingInfo:
    total_blocks: int
    total_apartments: int
    apartments_per_block: int
    floors_per_block: int
    total_area: float
    construction_type: ConstructionType

    def __post_init__(self) -> None:
        try:
            self.construction_type = ConstructionType(self.construction_type)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        for item in fields(self):
            if item.name == "construction_type":
                continue
            value = getattr(self, item.name)
            if not math.isfinite(value):
                raise ValidationError(f"{item.name} must be a finite number")
            if value < 0:
                raise ValidationError(f"{item.name} cannot be negative")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BuildingInfo":
        return cls(**{item.name: data[item.name] for item in fields(cls)})

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["construction_type"] = self.construction_type.value
        return data


@dataclass(slots=True)
class ClientInfo:
    name: str
    contact: str
    phone: str
    email: str
    address: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ClientInfo":
        return cls(
            name=data["name"],
            contact=data["contact"],
            phone=data["phone"],
            email=data["email"],
            address=data.get("address"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class ProjectDocument:
    name: str
    url: str
    type: str
    size: int
    uploaded_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProjectDocument":
        return cls(
            name=data["name"],
            url=data["url"],
            type=data["type"],
            size=data["size"],
            uploaded_at=parse_datetime(data.get("uploaded_at")) or utcnow(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "url": self.url,
            "type": self.type,
            "size": self.size,
            "uploaded_at": format_datetime(self.uploaded_at),
        }


@dataclass(slots=True)
class Project:
    """
    Construction project.

    Progress is kept within [0, 100] and the end date is always after the
    start date; both rules are checked whether the project is new or loaded
    from storage. Mutators only change memory and refresh ``updated_at``.
    """

    name: str
    description: str
    location: str
    start_date: datetime
    end_date: datetime
    project_manager: str
    building_info: BuildingInfo
    client: ClientInfo
    status: ProjectStatus = ProjectStatus.PLANNING
    progress: float = 0
    team: List[str] = field(default_factory=list)
    documents: List[ProjectDocument] = field(default_factory=list)
    id: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        try:
            self.status = ProjectStatus(self.status)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        if not self.name or not self.name.strip():
            raise ValidationError("Project name is required")
        self.start_date = ensure_utc(self.start_date)
        self.end_date = ensure_utc(self.end_date)
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at)
        _check_dates(self.start_date, self.end_date)
        _check_progress(self.progress)
        self.team = list(dict.fromkeys(self.team))

    # Construction ---------------------------------------------------------
    @classmethod
    def create(
        cls,
        *,
        name: str,
        description: str,
        location: str,
        start_date: datetime,
        end_date: datetime,
        project_manager: str,
        building_info: BuildingInfo,
        client: ClientInfo,
        team: Optional[List[str]] = None,
    ) -> "Project":
        now = utcnow()
        return cls(
            name=name.strip(),
            description=description,
            location=location,
            start_date=start_date,
            end_date=end_date,
            project_manager=project_manager,
            building_info=building_info,
            client=client,
            team=list(team or []),
            status=ProjectStatus.PLANNING,
            progress=0,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def from_persistence(cls, data: Dict[str, Any]) -> "Project":
        return cls(
            id=data.get("id"),
            name=data["name"],
            description=data.get("description", ""),
            location=data.get("location", ""),
            start_date=parse_datetime(data["start_date"]),
            end_date=parse_datetime(data["end_date"]),
            status=data.get("status", ProjectStatus.PLANNING),
            progress=data.get("progress", 0),
            project_manager=data["project_manager"],
            team=list(data.get("team") or []),
            building_info=BuildingInfo.from_dict(data["building_info"]),
            client=ClientInfo.from_dict(data["client"]),
            documents=[ProjectDocument.from_dict(item) for item in data.get("documents") or []],
            created_at=parse_datetime(data.get("created_at")) or utcnow(),
            updated_at=parse_datetime(data.get("updated_at")) or utcnow(),
        )

    # Mutations ------------------------------------------------------------
    def update_basic_info(
        self,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        location: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> None:
        new_start = ensure_utc(start_date) or self.start_date
        new_end = ensure_utc(end_date) or self.end_date
        _check_dates(new_start, new_end)
        if name:
            self.name = name.strip()
        if description:
            self.description = description
        if location:
            self.location = location
        self.start_date = new_start
        self.end_date = new_end
        self._touch()

    def update_status(self, status: ProjectStatus) -> None:
        target = ProjectStatus(status)
        if target is ProjectStatus.COMPLETED:
            self.complete()
            return
        if target not in PROJECT_TRANSITIONS[self.status]:
            raise InvalidTransitionError(current=self.status.value, target=target.value)
        self.status = target
        self._touch()

    def start(self) -> None:
        self.update_status(ProjectStatus.IN_PROGRESS)

    def update_progress(self, progress: float) -> None:
        _check_progress(progress)
        self.progress = progress
        self._touch()

    def can_be_completed(self) -> bool:
        return self.status is ProjectStatus.IN_PROGRESS and self.progress >= 100

    def complete(self) -> None:
        if not self.can_be_completed():
            raise InvalidTransitionError(
                "Project cannot be completed. It must be in progress with 100% progress",
                current=self.status.value,
                target=ProjectStatus.COMPLETED.value,
            )
        self.status = ProjectStatus.COMPLETED
        self._touch()

    def add_team_member(self, user_id: str) -> bool:
        if user_id in self.team:
            return False
        self.team.append(user_id)
        self._touch()
        return True

    def remove_team_member(self, user_id: str) -> bool:
        if user_id not in self.team:
            return False
        self.team = [member for member in self.team if member != user_id]
        self._touch()
        return True

    def update_building_info(self, **changes: Any) -> None:
        self.building_info = replace(self.building_info, **changes)
        self._touch()

    def update_client(self, **changes: Any) -> None:
        self.client = replace(self.client, **changes)
        self._touch()

    def add_document(self, *, name: str, url: str, type: str, size: int) -> ProjectDocument:
        document = ProjectDocument(name=name, url=url, type=type, size=size)
        self.documents.append(document)
        self._touch()
        return document

    def remove_document(self, name: str) -> bool:
        remaining = [doc for doc in self.documents if doc.name != name]
        if len(remaining) == len(self.documents):
            return False
        self.documents = remaining
        self._touch()
        return True

    # Queries --------------------------------------------------------------
    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        now = now or utcnow()
        return self.status is ProjectStatus.IN_PROGRESS and now > self.end_date

    def days_remaining(self, now: Optional[datetime] = None) -> int:
        now = now or utcnow()
        return math.ceil((self.end_date - now).total_seconds() / 86400)

    def _touch(self) -> None:
        self.updated_at = utcnow()

    # Serialisation --------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "location": self.location,
            "start_date": format_datetime(self.start_date),
            "end_date": format_datetime(self.end_date),
            "status": self.status.value,
            "progress": self.progress,
            "project_manager": self.project_manager,
            "team": list(self.team),
            "building_info": self.building_info.to_dict(),
            "client": self.client.to_dict(),
            "documents": [doc.to_dict() for doc in self.documents],
            "created_at": format_datetime(self.created_at),
            "updated_at": format_datetime(self.updated_at),
        }

    to_persistence = to_dict


def _check_dates(start: Optional[datetime], end: Optional[datetime]) -> None:
    if start is None or end is None:
        raise ValidationError("Start and end dates are required")
    if end <= start:
        raise ValidationError("End date must be after start date")


def _check_progress(progress: float) -> None:
    if isinstance(progress, bool) or not isinstance(progress, (int, float)):
        raise ValidationError("Progress must be a number")
    if not math.isfinite(progress):
        raise ValidationError("Progress must be a finite number")
    if progress < 0 or progress > 100:
        raise ValidationError("Progress must be between 0 and 100")
