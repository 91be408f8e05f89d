"""
Scene repository implementation using Supabase.
"""

from typing import Any, Dict, Optional

from repositories.base import SupabaseRepository
from entities.scene import Scene, SceneCreate, SceneUpdate
from common.exceptions import DatabaseException, ResourceConflictException
from common.logging import get_logger

logger = get_logger("scene_repository")


class SceneRepository(SupabaseRepository[Scene]):
    """
    Repository for Scene entity operations with Supabase.
    """

    entity_class = Scene
    default_order_by = ("order", "scene_number")

    def __init__(self, supabase_client, table_name: str = "scenes"):
        super().__init__(supabase_client, table_name)

    async def max_order(self, script_version_id: int) -> int:
        """Highest `order` among the version's scenes, 0 when there are none."""
        try:
            res = (
                self.supabase
                .table(self.table_name)
                .select("order")
                .eq("script_version_id", script_version_id)
                .order("order", desc=True)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to read scene order for version {script_version_id}: {e}", exc_info=True)
            raise DatabaseException(
                detail="Failed to retrieve scene order",
                operation="max_order",
                table=self.table_name,
            )
        rows = getattr(res, "data", None) or []
        return int(rows[0].get("order") or 0) if rows else 0

    async def scene_number_taken(self, script_version_id: int, scene_number: int) -> bool:
        count = await self.count({"script_version_id": script_version_id, "scene_number": scene_number})
        return count > 0

    async def _ensure_scene_number_free(self, script_version_id: int, scene_number: int) -> None:
        if await self.scene_number_taken(script_version_id, scene_number):
            raise ResourceConflictException(
                detail=f"Scene number {scene_number} already exists in this version",
                resource_type="Scene",
                context={
                    "script_version_id": script_version_id,
                    "scene_number": scene_number,
                },
            )

    async def create(self, scene_create: SceneCreate) -> Scene:
        """Create a scene, appending it after the last one when no order is given."""
        await self._ensure_scene_number_free(scene_create.script_version_id, scene_create.scene_number)

        payload: Dict[str, Any] = scene_create.model_dump(mode="json")
        if not payload.get("order"):
            payload["order"] = await self.max_order(scene_create.script_version_id) + 1
        return await self._insert(payload)

    async def update(self, entity_id: int, update_data: SceneUpdate) -> Optional[Scene]:
        """Update a scene; a changed scene number must stay unique within its version."""
        if update_data.scene_number is not None:
            scene = await self.get_or_raise(entity_id)
            if update_data.scene_number != scene.scene_number:
                await self._ensure_scene_number_free(scene.script_version_id, update_data.scene_number)
        return await super().update(entity_id, update_data)
