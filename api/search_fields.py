from typing import Dict, List
from fastapi import APIRouter, Path

from common.exceptions import ResourceNotFoundException
from common.ransackable import ransackable_associations, ransackable_attributes, ransackable_scopes
from common.responses import COMMON_RESPONSES
from entities.project import Project
from entities.project_type import ProjectType
from entities.scene import Scene
from entities.script import Script

router = APIRouter(prefix="/search-fields", tags=["Search"])

SEARCHABLE_MODELS = {
    "projects": Project,
    "project-types": ProjectType,
    "scripts": Script,
    "scenes": Scene,
}


@router.get("/{resource}",
    summary="Filterable fields of a resource",
    description="Attributes, associations and scopes accepted in `q[...]` parameters.",
    response_model=Dict[str, List[str]],
    responses={**COMMON_RESPONSES["not_found"]}
)
def get_search_fields(
    resource: str = Path(..., description="Resource name, e.g. scripts"),
) -> Dict[str, List[str]]:
    model = SEARCHABLE_MODELS.get(resource)
    if model is None:
        raise ResourceNotFoundException(resource_type="Searchable resource", resource_id=resource)
    return {
        "attributes": sorted(ransackable_attributes(model)),
        "associations": sorted(ransackable_associations(model)),
        "scopes": sorted(ransackable_scopes(model)),
    }
