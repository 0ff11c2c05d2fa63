from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from ....domain.models import ConstructionType, ProjectStatus


class BuildingInfoPayload(BaseModel):
    total_blocks: int = Field(..., ge=0)
    total_apartments: int = Field(..., ge=0)
    apartments_per_block: int = Field(..., ge=0)
    floors_per_block: int = Field(..., ge=0)
    total_area: float = Field(..., ge=0, allow_inf_nan=False)
    construction_type: ConstructionType


class BuildingInfoUpdatePayload(BaseModel):
    total_blocks: Optional[int] = Field(default=None, ge=0)
    total_apartments: Optional[int] = Field(default=None, ge=0)
    apartments_per_block: Optional[int] = Field(default=None, ge=0)
    floors_per_block: Optional[int] = Field(default=None, ge=0)
    total_area: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    construction_type: Optional[ConstructionType] = None


class ClientPayload(BaseModel):
    name: str = Field(..., min_length=1)
    contact: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: EmailStr
    address: Optional[str] = None


class ClientUpdatePayload(BaseModel):
    name: Optional[str] = None
    contact: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None


class ProjectCreatePayload(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: str = ""
    location: str = Field(..., min_length=1)
    start_date: datetime
    end_date: datetime
    building_info: BuildingInfoPayload
    client: ClientPayload
    project_manager: Optional[str] = None
    team: List[str] = Field(default_factory=list)


class ProjectUpdatePayload(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class ProjectProgressPayload(BaseModel):
    progress: float = Field(..., ge=0, le=100, allow_inf_nan=False)


class ProjectStatusPayload(BaseModel):
    status: ProjectStatus


class TeamMemberPayload(BaseModel):
    user_id: str = Field(..., min_length=1)


class DocumentPayload(BaseModel):
    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    size: int = Field(..., ge=0)
