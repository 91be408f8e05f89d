"""
Project repository implementation using Supabase.
"""

from typing import Any, Dict

from repositories.base import SupabaseRepository
from entities.project import Project, ProjectCreate
from common.logging import get_logger

logger = get_logger("project_repository")


class ProjectRepository(SupabaseRepository[Project]):
    """
    Repository for Project entity operations with Supabase.
    """

    entity_class = Project

    def __init__(self, supabase_client, table_name: str = "projects"):
        super().__init__(supabase_client, table_name)

    async def create(self, project_create: ProjectCreate) -> Project:
        """Create a new project."""
        payload: Dict[str, Any] = project_create.model_dump(mode="json", exclude_none=True)
        project = await self._insert(payload)
        logger.info(f"Created project {project.id}", extra={"project_id": project.id})
        return project
