"""
Script service using Repository pattern.
"""

from typing import Any, Mapping, Optional

from entities.script import Script, ScriptCreate
from repositories.project_repository import ProjectRepository
from repositories.script_repository import ScriptRepository
from common.logging import log_entity_event
from common.responses import PaginatedResponse
from services.base import SearchableService



class ScriptService(SearchableService):
    """Business logic for scripts."""

    model = Script

    def __init__(self, script_repository: ScriptRepository, project_repository: ProjectRepository):
        super().__init__(script_repository)
        self.script_repository = script_repository
        self.project_repository = project_repository

    async def list_scripts(
        self,
        project_id: Optional[int] = None,
        q: Optional[Mapping[str, Any]] = None,
        page: int = 1,
        per_page: Optional[int] = None,
    ) -> PaginatedResponse:
        """List scripts, optionally within one project (which must exist)."""
        filters = None
        if project_id is not None:
            await self.project_repository.get_or_raise(project_id)
            filters = {"project_id": project_id}
        return await self._search_page("list_scripts", q, page, per_page, filters=filters)

    async def get_script(self, script_id: int) -> Script:
        return await self.script_repository.get_or_raise(script_id)

    async def create_script(self, script_create: ScriptCreate) -> Script:
        await self.project_repository.get_or_raise(script_create.project_id)
        script = await self.script_repository.create(script_create)
        log_entity_event(
            entity_type="script",
            entity_id=script.id,
            action="created",
            user_id=script.created_by_user_id,
            details={"project_id": script.project_id, "script_type": script.script_type},
        )
        return script


def create_script_service(
    script_repository: ScriptRepository, project_repository: ProjectRepository
) -> ScriptService:
    """Factory function to create ScriptService instance."""
    return ScriptService(script_repository, project_repository)
