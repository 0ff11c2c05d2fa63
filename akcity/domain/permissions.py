"""Role to permission mapping.

This is the only copy of the table. The request authorization guard, the
``User`` entity and the ``/permissions`` endpoint (used by clients for
capability checks) all read from here.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Union

from .roles import UserRole

WILDCARD = "*"

ROLE_PERMISSIONS: Mapping[UserRole, FrozenSet[str]] = MappingProxyType(
    {
        UserRole.GENERAL_MANAGER: frozenset({WILDCARD}),
        UserRole.PROJECT_MANAGER: frozenset(
            {
                "project:read",
                "project:write",
                "project:delete",
                "task:read",
                "task:write",
                "task:delete",
                "user:read",
                "report:read",
                "report:write",
            }
        ),
        UserRole.ARCHITECT: frozenset(
            {"project:read", "task:read", "task:write", "document:read", "document:write"}
        ),
        UserRole.CHIEF_ENGINEER: frozenset(
            {
                "project:read",
                "task:read",
                "task:write",
                "report:read",
                "report:write",
                "quality:read",
                "quality:write",
            }
        ),
        UserRole.DRIVER: frozenset({"task:read", "material:read", "delivery:read", "delivery:write"}),
        UserRole.WORKER: frozenset({"task:read", "report:write", "material:request"}),
        UserRole.PURCHASING_MANAGER: frozenset(
            {
                "material:read",
                "material:write",
                "material:delete",
                "supplier:read",
                "supplier:write",
            }
        ),
        UserRole.CLIENT: frozenset({"project:read", "report:read"}),
    }
)


def _coerce_role(role: Union[UserRole, str, None]):
    if isinstance(role, UserRole):
        return role
    try:
        return UserRole(role)
    except ValueError:
        return None


def permissions_for(role: Union[UserRole, str, None]) -> FrozenSet[str]:
    """Return the permissions granted to ``role``; unknown roles get none."""
    resolved = _coerce_role(role)
    if resolved is None:
        return frozenset()
    return ROLE_PERMISSIONS[resolved]


def has_permission(role: Union[UserRole, str, None], permission: str) -> bool:
    granted = permissions_for(role)
    return WILDCARD in granted or permission in granted


def as_table() -> Dict[str, list]:
    """Serialisable copy of the table, keyed by role value."""
    return {role.value: sorted(perms) for role, perms in ROLE_PERMISSIONS.items()}
