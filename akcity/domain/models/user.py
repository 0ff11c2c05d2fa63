"""User domain model for authentication, authorization and team membership."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ..clock import ensure_utc, format_datetime, parse_datetime, utcnow
from ..errors import ValidationError
from ..permissions import has_permission, permissions_for
from ..roles import UserRole


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    PENDING = "pending"


@dataclass(slots=True)
class User:
    """
    User entity representing every account of the platform.

    Attributes:
        id: Opaque identifier assigned by the repository
        name: Display name
        email: Unique, lowercased e-mail address
        password: Password hash (never the plaintext once persisted)
        phone: Contact phone number
        role: One of the eight ``UserRole`` values
        status: Account status; only active accounts may log in
        avatar: Optional avatar URL
        last_login: Timestamp of the last successful authentication
        projects: Identifiers of the projects the user belongs to
        created_at: Account creation timestamp
        updated_at: Last update timestamp
    """

    name: str
    email: str
    password: str = field(repr=False)
    phone: str
    role: UserRole
    status: UserStatus = UserStatus.ACTIVE
    id: Optional[str] = None
    avatar: Optional[str] = None
    last_login: Optional[datetime] = None
    projects: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        try:
            self.role = UserRole(self.role)
            self.status = UserStatus(self.status)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        self.email = self.email.strip().lower()
        self.last_login = ensure_utc(self.last_login)
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at)

    # Construction ---------------------------------------------------------
    @classmethod
    def create(
        cls,
        *,
        name: str,
        email: str,
        password_hash: str,
        phone: str,
        role: UserRole,
        avatar: Optional[str] = None,
    ) -> "User":
        """Build a brand new, active user. ``password_hash`` must already be hashed."""
        now = utcnow()
        return cls(
            name=name.strip(),
            email=email,
            password=password_hash,
            phone=phone.strip(),
            role=role,
            avatar=avatar,
            status=UserStatus.ACTIVE,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def from_persistence(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=data.get("id"),
            name=data["name"],
            email=data["email"],
            password=data["password"],
            phone=data["phone"],
            role=data["role"],
            status=data.get("status", UserStatus.ACTIVE),
            avatar=data.get("avatar"),
            last_login=parse_datetime(data.get("last_login")),
            projects=list(data.get("projects") or []),
            created_at=parse_datetime(data.get("created_at")) or utcnow(),
            updated_at=parse_datetime(data.get("updated_at")) or utcnow(),
        )

    # Behaviour ------------------------------------------------------------
    @property
    def is_active(self) -> bool:
        return self.status is UserStatus.ACTIVE

    def update_profile(
        self,
        *,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> None:
        if name:
            self.name = name.strip()
        if phone:
            self.phone = phone.strip()
        if avatar:
            self.avatar = avatar
        self._touch()

    def change_password(self, new_password_hash: str) -> None:
        self.password = new_password_hash
        self._touch()

    def update_last_login(self) -> None:
        now = utcnow()
        self.last_login = now
        self.updated_at = now

    def activate(self) -> None:
        self.status = UserStatus.ACTIVE
        self._touch()

    def deactivate(self) -> None:
        self.status = UserStatus.INACTIVE
        self._touch()

    def suspend(self) -> None:
        self.status = UserStatus.SUSPENDED
        self._touch()

    def join_project(self, project_id: str) -> None:
        if project_id not in self.projects:
            self.projects.append(project_id)
            self._touch()

    def leave_project(self, project_id: str) -> None:
        if project_id in self.projects:
            self.projects = [item for item in self.projects if item != project_id]
            self._touch()

    def has_permission(self, permission: str) -> bool:
        return has_permission(self.role, permission)

    def permissions(self) -> List[str]:
        return sorted(permissions_for(self.role))

    def _touch(self) -> None:
        self.updated_at = utcnow()

    # Serialisation --------------------------------------------------------
    def to_public_dict(self) -> Dict[str, Any]:
        """Outward representation; the password hash is never included."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "role": self.role.value,
            "status": self.status.value,
            "avatar": self.avatar,
            "last_login": format_datetime(self.last_login),
            "projects": list(self.projects),
            "created_at": format_datetime(self.created_at),
            "updated_at": format_datetime(self.updated_at),
        }

    def to_persistence(self) -> Dict[str, Any]:
        data = self.to_public_dict()
        data["password"] = self.password
        return data
