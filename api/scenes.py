from typing import Any, Dict
from fastapi import APIRouter, Query, Path, Body, Response

from api.search_params import SearchParams
from config.config import settings
from common.responses import COMMON_RESPONSES, PaginatedResponse
from dependencies import SceneServiceDep
from entities.scene import SceneCreate, SceneUpdate

router = APIRouter(prefix="/scenes", tags=["Scenes"])


@router.get("",
    summary="List scenes of a script version",
    description="Scenes ordered by `order` then `scene_number`.",
    response_model=PaginatedResponse,
    responses={**COMMON_RESPONSES["validation_error"]}
)
async def list_scenes(
    service: SceneServiceDep,
    q: SearchParams,
    script_version_id: int = Query(..., description="Script version ID"),
    page: int = Query(1, ge=1, description="Page number"),
    per_page: int = Query(settings.scenes_per_page, ge=1, le=settings.max_per_page, description="Items per page"),
) -> PaginatedResponse:
    return await service.list_scenes(script_version_id, q=q, page=page, per_page=per_page)


@router.get("/{scene_id}",
    summary="Get a scene",
    response_model=Dict[str, Any],
    responses={**COMMON_RESPONSES["not_found"]}
)
async def get_scene(
    service: SceneServiceDep,
    scene_id: int = Path(..., description="Scene ID"),
) -> Dict[str, Any]:
    scene = await service.get_scene(scene_id)
    return scene.to_dict()


@router.post("",
    summary="Create a scene",
    description="Without an `order` the scene is appended after the last one.",
    response_model=Dict[str, Any],
    status_code=201,
    responses={**COMMON_RESPONSES["conflict"], **COMMON_RESPONSES["validation_error"]}
)
async def create_scene(
    service: SceneServiceDep,
    scene: SceneCreate = Body(...),
) -> Dict[str, Any]:
    created = await service.create_scene(scene)
    return created.to_dict()


@router.put("/{scene_id}",
    summary="Update a scene",
    description="Only provided fields change. A new `scene_number` must be unused in the scene's version.",
    response_model=Dict[str, Any],
    responses={
        **COMMON_RESPONSES["not_found"],
        **COMMON_RESPONSES["conflict"],
        **COMMON_RESPONSES["validation_error"],
    }
)
async def update_scene(
    service: SceneServiceDep,
    scene_id: int = Path(..., description="Scene ID"),
    scene: SceneUpdate = Body(...),
) -> Dict[str, Any]:
    updated = await service.update_scene(scene_id, scene)
    return updated.to_dict()


@router.delete("/{scene_id}",
    summary="Delete a scene",
    status_code=204,
    response_class=Response,
    responses={**COMMON_RESPONSES["not_found"]}
)
async def delete_scene(
    service: SceneServiceDep,
    scene_id: int = Path(..., description="Scene ID"),
) -> Response:
    await service.delete_scene(scene_id)
    return Response(status_code=204)
