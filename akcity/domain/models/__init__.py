"""Domain models for the AKCity construction platform."""

from ..roles import UserRole
from .project import BuildingInfo, ClientInfo, ConstructionType, Project, ProjectDocument, ProjectStatus
from .task import Task, TaskAttachment, TaskCategory, TaskLocation, TaskPriority, TaskStatus
from .user import User, UserStatus

__all__ = [
    "BuildingInfo",
    "ClientInfo",
    "ConstructionType",
    "Project",
    "ProjectDocument",
    "ProjectStatus",
    "Task",
    "TaskAttachment",
    "TaskCategory",
    "TaskLocation",
    "TaskPriority",
    "TaskStatus",
    "User",
    "UserRole",
    "UserStatus",
]
