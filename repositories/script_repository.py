"""
Script repository implementation using Supabase.
"""

from typing import Any, Dict

from repositories.base import SupabaseRepository
from entities.script import Script, ScriptCreate, ScriptStatus
from common.logging import get_logger

logger = get_logger("script_repository")


class ScriptRepository(SupabaseRepository[Script]):
    """
    Repository for Script entity operations with Supabase.
    """

    entity_class = Script

    def __init__(self, supabase_client, table_name: str = "scripts", projects_table: str = "projects"):
        super().__init__(supabase_client, table_name)
        self.projects_table = projects_table

    def _association_select(self, association: str) -> str:
        if association == "project":
            return f"project:{self.projects_table}!inner(id)"
        return super()._association_select(association)

    async def create(self, script_create: ScriptCreate) -> Script:
        """Create a new script in draft status."""
        payload: Dict[str, Any] = script_create.model_dump(mode="json", exclude_none=True)
        payload["status"] = ScriptStatus.DRAFT.value
        script = await self._insert(payload)
        logger.info(
            f"Created script {script.id}",
            extra={"script_id": script.id, "project_id": script.project_id}
        )
        return script
