from typing import Any, Dict

from fastapi import APIRouter, Depends

from ....domain.models import User
from ....domain.permissions import as_table
from ..dependencies import get_current_user
from ..responses import envelope

router = APIRouter(prefix="/api/v1/permissions", tags=["permissions"])


@router.get("")
async def permission_table() -> Dict[str, Any]:
    """Role to permission mapping, served for clients that render role-aware UI."""
    return envelope(as_table())


@router.get("/me")
async def my_permissions(user: User = Depends(get_current_user)) -> Dict[str, Any]:
    return envelope({"role": user.role.value, "permissions": user.permissions()})
