from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Query, Body

from config.config import settings
from common.responses import COMMON_RESPONSES
from dependencies import ProjectTypeServiceDep
from entities.project_type import ProjectTypeCreate

router = APIRouter(prefix="/project-types", tags=["Project Types"])


@router.get("",
    summary="Search project types",
    description="Project types ordered by name, optionally filtered by a case-insensitive name fragment.",
    response_model=List[Dict[str, Any]]
)
async def search_project_types(
    service: ProjectTypeServiceDep,
    q: Optional[str] = Query(None, description="Search term"),
    limit: int = Query(settings.project_types_limit, ge=1, le=settings.max_per_page, description="Maximum number of results"),
) -> List[Dict[str, Any]]:
    project_types = await service.search_project_types(term=q, limit=limit)
    return [project_type.to_dict() for project_type in project_types]


@router.post("",
    summary="Find or create a project type",
    description="Returns the existing type whose name matches case-insensitively, otherwise creates it.",
    response_model=Dict[str, Any],
    responses={**COMMON_RESPONSES["validation_error"]}
)
async def create_project_type(
    service: ProjectTypeServiceDep,
    project_type: ProjectTypeCreate = Body(...),
) -> Dict[str, Any]:
    resolved = await service.find_or_create(project_type)
    return resolved.to_dict()
