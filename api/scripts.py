from typing import Any, Dict, Optional
from fastapi import APIRouter, Query, Path, Body

from api.search_params import SearchParams
from config.config import settings
from common.responses import COMMON_RESPONSES, PaginatedResponse
from dependencies import ScriptServiceDep
from entities.script import ScriptCreate

router = APIRouter(prefix="/scripts", tags=["Scripts"])


@router.get("",
    summary="List scripts",
    description="Paginated scripts, optionally within one project. Supports ransack-style "
                "parameters including project fields, e.g. `q[project_title_cont]=pilot`.",
    response_model=PaginatedResponse,
    responses={**COMMON_RESPONSES["not_found"], **COMMON_RESPONSES["validation_error"]}
)
async def list_scripts(
    service: ScriptServiceDep,
    q: SearchParams,
    project_id: Optional[int] = Query(None, description="Only scripts of this project"),
    page: int = Query(1, ge=1, description="Page number"),
    per_page: int = Query(settings.default_per_page, ge=1, le=settings.max_per_page, description="Items per page"),
) -> PaginatedResponse:
    return await service.list_scripts(project_id=project_id, q=q, page=page, per_page=per_page)


@router.get("/{script_id}",
    summary="Get a script",
    response_model=Dict[str, Any],
    responses={**COMMON_RESPONSES["not_found"]}
)
async def get_script(
    service: ScriptServiceDep,
    script_id: int = Path(..., description="Script ID"),
) -> Dict[str, Any]:
    script = await service.get_script(script_id)
    return script.to_dict()


@router.post("",
    summary="Create a script",
    description="New scripts start in draft status.",
    response_model=Dict[str, Any],
    status_code=201,
    responses={**COMMON_RESPONSES["not_found"], **COMMON_RESPONSES["validation_error"]}
)
async def create_script(
    service: ScriptServiceDep,
    script: ScriptCreate = Body(...),
) -> Dict[str, Any]:
    created = await service.create_script(script)
    return created.to_dict()
