"""
Script entity models.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from common.validation import is_blank, parse_bool
from entities.base import Entity
from entities.project import Project


class ScriptType(str, Enum):
    SCREENPLAY = "screenplay"
    TREATMENT = "treatment"
    OUTLINE = "outline"
    OTHER = "other"


class ScriptStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    LOCKED = "locked"
    ARCHIVED = "archived"


class Script(Entity):
    """
    Script belonging to a project. Content lives in its versions.
    """

    whitelisted_ransackable_attributes = (
        "title",
        "script_type",
        "status",
        "description",
        "project_id",
        "created_by_user_id",
    )
    whitelisted_ransackable_associations = ("project",)
    whitelisted_ransackable_scopes = ("active", "draft", "archived", "by_project", "by_type")
    ransackable_association_models = {"project": Project}

    project_id: int = Field(..., description="Owning project")
    created_by_user_id: Optional[str] = Field(None, description="Creator user UUID")
    title: str = Field(..., min_length=1, max_length=200, description="Script title")
    script_type: ScriptType = Field(ScriptType.SCREENPLAY, description="Kind of script")
    status: ScriptStatus = Field(ScriptStatus.DRAFT, description="Script status")
    description: Optional[str] = Field(None, description="Script description")

    @classmethod
    def scope_active(cls, value: Any) -> Optional[Dict[str, Any]]:
        return {"status": ScriptStatus.ACTIVE.value} if parse_bool(value, "active") else None

    @classmethod
    def scope_draft(cls, value: Any) -> Optional[Dict[str, Any]]:
        return {"status": ScriptStatus.DRAFT.value} if parse_bool(value, "draft") else None

    @classmethod
    def scope_archived(cls, value: Any) -> Optional[Dict[str, Any]]:
        return {"status": ScriptStatus.ARCHIVED.value} if parse_bool(value, "archived") else None

    @classmethod
    def scope_by_project(cls, project_id: Any) -> Optional[Dict[str, Any]]:
        if is_blank(project_id):
            return None
        return {"project_id": project_id}

    @classmethod
    def scope_by_type(cls, script_type: Any) -> Optional[Dict[str, Any]]:
        if is_blank(script_type):
            return None
        return {"script_type": script_type}


class ScriptCreate(BaseModel):
    """
    Model for creating a script. New scripts always start as drafts.
    """

    project_id: int = Field(..., description="Project ID")
    title: str = Field(..., min_length=1, max_length=200, description="Script title")
    script_type: ScriptType = Field(ScriptType.SCREENPLAY, description="Script type")
    description: Optional[str] = Field(None, description="Script description")
    created_by_user_id: Optional[str] = Field(None, description="Creator user UUID")

    @field_validator('title', mode='before')
    @classmethod
    def strip_title(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v
