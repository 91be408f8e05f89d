"""
Project entity models.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from common.validation import parse_bool
from entities.base import Entity


class ProjectStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    LOCKED = "locked"
    ARCHIVED = "archived"
    COMPLETED = "completed"


class Project(Entity):
    """
    Film, series or other production that owns scripts.
    """

    whitelisted_ransackable_attributes = (
        "title",
        "status",
        "project_type",
        "company_id",
        "created_by_user_id",
    )
    whitelisted_ransackable_scopes = ("active", "completed", "draft")

    title: str = Field(..., min_length=1, max_length=200, description="Project title")
    description: Optional[str] = Field(None, description="Project description")
    status: ProjectStatus = Field(ProjectStatus.DRAFT, description="Project status")
    budget: Optional[Decimal] = Field(None, ge=0, description="Project budget")
    project_type: str = Field("film", min_length=1, max_length=50, description="Project type, e.g. film or series")
    company_id: Optional[int] = Field(None, description="Owning company")
    created_by_user_id: Optional[str] = Field(None, description="Creator user UUID")

    @classmethod
    def scope_active(cls, value: Any) -> Optional[Dict[str, Any]]:
        return {"status": ProjectStatus.ACTIVE.value} if parse_bool(value, "active") else None

    @classmethod
    def scope_completed(cls, value: Any) -> Optional[Dict[str, Any]]:
        return {"status": ProjectStatus.COMPLETED.value} if parse_bool(value, "completed") else None

    @classmethod
    def scope_draft(cls, value: Any) -> Optional[Dict[str, Any]]:
        return {"status": ProjectStatus.DRAFT.value} if parse_bool(value, "draft") else None

    def is_active(self) -> bool:
        return self.status == ProjectStatus.ACTIVE.value


class ProjectCreate(BaseModel):
    """
    Model for creating a project.
    """

    title: str = Field(..., min_length=1, max_length=200, description="Project title")
    project_type: str = Field(..., min_length=1, max_length=50, description="Project type (film, series, short, ad, documentary, or custom)")
    description: Optional[str] = Field(None, description="Project description")
    status: ProjectStatus = Field(ProjectStatus.DRAFT, description="Project status")
    budget: Optional[Decimal] = Field(None, ge=0, description="Project budget")
    company_id: Optional[int] = Field(None, description="Owning company")
    created_by_user_id: Optional[str] = Field(None, description="Creator user UUID")

    @field_validator('title', 'project_type', mode='before')
    @classmethod
    def strip_text(cls, v):
        """Trim surrounding whitespace."""
        if isinstance(v, str):
            return v.strip()
        return v


class ProjectUpdate(BaseModel):
    """
    Model for updating a project. Only provided fields are changed.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    project_type: Optional[str] = Field(None, min_length=1, max_length=50)
    status: Optional[ProjectStatus] = None
    budget: Optional[Decimal] = Field(None, ge=0)

    @field_validator('title', 'project_type', mode='before')
    @classmethod
    def strip_text(cls, v):
        """Trim surrounding whitespace."""
        if isinstance(v, str):
            return v.strip()
        return v
