"""
Scene entity models.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from common.validation import is_blank
from entities.base import Entity


class Scene(Entity):
    """
    Scene of a script version, ordered by `order` then `scene_number`.
    """

    whitelisted_ransackable_attributes = (
        "scene_number",
        "slugline",
        "script_version_id",
        "order",
    )
    whitelisted_ransackable_scopes = ("by_version",)

    script_version_id: int = Field(..., description="Owning script version")
    scene_number: int = Field(..., gt=0, description="Scene number, unique per version")
    slugline: Optional[str] = Field(None, description="Scene heading, e.g. INT. KITCHEN - NIGHT")
    content: Optional[str] = Field(None, description="Scene text")
    order: int = Field(0, ge=0, description="Display order within the version")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Free-form scene metadata")

    @classmethod
    def scope_by_version(cls, version_id: Any) -> Optional[Dict[str, Any]]:
        if is_blank(version_id):
            return None
        return {"script_version_id": version_id}


class SceneCreate(BaseModel):
    """
    Model for creating a scene. Without an `order` the scene is appended.
    """

    script_version_id: int = Field(..., description="Script version ID")
    scene_number: int = Field(..., gt=0, description="Scene number")
    slugline: Optional[str] = Field(None, description="Scene heading")
    content: Optional[str] = Field(None, description="Scene text")
    order: Optional[int] = Field(None, ge=0, description="Display order; appended when omitted or 0")
    metadata: Dict[str, Any] = Field(default_factory=dict)


class SceneUpdate(BaseModel):
    """
    Model for updating a scene. Only provided fields are written.
    """

    scene_number: Optional[int] = Field(None, gt=0, description="Scene number, unique per version")
    slugline: Optional[str] = Field(None, description="Scene heading")
    content: Optional[str] = Field(None, description="Scene text")
    order: Optional[int] = Field(None, ge=0, description="Display order")
    metadata: Optional[Dict[str, Any]] = Field(None, description="Replaces the scene metadata")
