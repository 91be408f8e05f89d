from typing import Any, Dict
from fastapi import APIRouter, Query, Path, Body

from api.search_params import SearchParams
from config.config import settings
from common.responses import COMMON_RESPONSES, PaginatedResponse
from dependencies import ProjectServiceDep
from entities.project import ProjectCreate, ProjectUpdate

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.get("",
    summary="List projects",
    description="Paginated projects. Filter and sort with ransack-style parameters, "
                "e.g. `q[title_cont]=pilot&q[status_eq]=active&q[s]=created_at desc`.",
    response_model=PaginatedResponse,
    responses={**COMMON_RESPONSES["validation_error"]}
)
async def list_projects(
    service: ProjectServiceDep,
    q: SearchParams,
    page: int = Query(1, ge=1, description="Page number"),
    per_page: int = Query(settings.default_per_page, ge=1, le=settings.max_per_page, description="Items per page"),
) -> PaginatedResponse:
    return await service.list_projects(q=q, page=page, per_page=per_page)


@router.get("/{project_id}",
    summary="Get a project",
    response_model=Dict[str, Any],
    responses={**COMMON_RESPONSES["not_found"]}
)
async def get_project(
    service: ProjectServiceDep,
    project_id: int = Path(..., description="Project ID"),
) -> Dict[str, Any]:
    project = await service.get_project(project_id)
    return project.to_dict()


@router.post("",
    summary="Create a project",
    response_model=Dict[str, Any],
    status_code=201,
    responses={**COMMON_RESPONSES["validation_error"]}
)
async def create_project(
    service: ProjectServiceDep,
    project: ProjectCreate = Body(...),
) -> Dict[str, Any]:
    created = await service.create_project(project)
    return created.to_dict()


@router.put("/{project_id}",
    summary="Update a project",
    response_model=Dict[str, Any],
    responses={**COMMON_RESPONSES["not_found"], **COMMON_RESPONSES["validation_error"]}
)
async def update_project(
    service: ProjectServiceDep,
    project_id: int = Path(..., description="Project ID"),
    project: ProjectUpdate = Body(...),
) -> Dict[str, Any]:
    updated = await service.update_project(project_id, project)
    return updated.to_dict()


@router.delete("/{project_id}",
    summary="Delete a project",
    response_model=Dict[str, Any],
    responses={**COMMON_RESPONSES["not_found"]}
)
async def delete_project(
    service: ProjectServiceDep,
    project_id: int = Path(..., description="Project ID"),
) -> Dict[str, Any]:
    await service.delete_project(project_id)
    return {"success": True, "message": "Project deleted successfully"}
