"""
Scene service using Repository pattern.
"""

from typing import Any, Mapping, Optional

from entities.scene import Scene, SceneCreate, SceneUpdate
from repositories.scene_repository import SceneRepository
from common.exceptions import ResourceNotFoundException
from common.logging import get_logger, log_entity_event
from common.responses import PaginatedResponse
from config.config import settings
from services.base import SearchableService

logger = get_logger("scene_service")


class SceneService(SearchableService):
    """Business logic for scenes of a script version."""

    model = Scene

    def __init__(self, scene_repository: SceneRepository):
        super().__init__(scene_repository)
        self.scene_repository = scene_repository

    async def list_scenes(
        self,
        script_version_id: int,
        q: Optional[Mapping[str, Any]] = None,
        page: int = 1,
        per_page: Optional[int] = None,
    ) -> PaginatedResponse:
        """Scenes of one version, ordered by `order` then `scene_number` unless `q[s]` says otherwise."""
        return await self._search_page(
            "list_scenes",
            q,
            page,
            per_page or settings.scenes_per_page,
            filters={"script_version_id": script_version_id},
            order_by=["order", "scene_number"],
        )

    async def get_scene(self, scene_id: int) -> Scene:
        return await self.scene_repository.get_or_raise(scene_id)

    async def create_scene(self, scene_create: SceneCreate) -> Scene:
        scene = await self.scene_repository.create(scene_create)
        logger.info(
            f"Created scene {scene.id}",
            extra={"scene_id": scene.id, "script_version_id": scene.script_version_id, "order": scene.order}
        )
        return scene

    async def update_scene(self, scene_id: int, scene_update: SceneUpdate) -> Scene:
        scene = await self.scene_repository.update(scene_id, scene_update)
        if scene is None:
            raise ResourceNotFoundException(resource_type="Scene", resource_id=scene_id)
        log_entity_event(
            entity_type="scene",
            entity_id=scene_id,
            action="updated",
            details={"fields": sorted(scene_update.model_dump(exclude_none=True))},
        )
        return scene

    async def delete_scene(self, scene_id: int) -> None:
        if not await self.scene_repository.delete(scene_id):
            raise ResourceNotFoundException(resource_type="Scene", resource_id=scene_id)
        log_entity_event(
            entity_type="scene",
            entity_id=scene_id,
            action="deleted",
        )


def create_scene_service(scene_repository: SceneRepository) -> SceneService:
    """Factory function to create SceneService instance."""
    return SceneService(scene_repository)
