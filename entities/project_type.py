"""
Project type entity models.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from common.search import escape_like
from common.validation import is_blank
from entities.base import Entity


class ProjectType(Entity):
    """
    User-extensible list of project types (film, series, documentary, ...).
    """

    whitelisted_ransackable_attributes = ("name",)
    whitelisted_ransackable_scopes = ("search",)

    name: str = Field(..., min_length=1, max_length=50, description="Project type name")

    @classmethod
    def scope_search(cls, term: Any) -> Optional[Dict[str, Any]]:
        """Case-insensitive partial match on name."""
        if is_blank(term):
            return None
        return {"name": {"ilike": f"%{escape_like(str(term).strip())}%"}}


class ProjectTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50, description="Project type name")

    @field_validator('name', mode='before')
    @classmethod
    def strip_name(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v
