"""
Project type repository implementation using Supabase.
"""

from typing import Optional

from repositories.base import SupabaseRepository
from entities.project_type import ProjectType, ProjectTypeCreate
from common.exceptions import DatabaseException
from common.search import escape_like
from common.logging import get_logger

logger = get_logger("project_type_repository")


class ProjectTypeRepository(SupabaseRepository[ProjectType]):
    """
    Repository for ProjectType entity operations with Supabase.
    """

    entity_class = ProjectType
    default_order_by = ("name",)

    def __init__(self, supabase_client, table_name: str = "project_types"):
        super().__init__(supabase_client, table_name)

    async def create(self, project_type_create: ProjectTypeCreate) -> ProjectType:
        """Insert a project type as given."""
        return await self._insert({"name": project_type_create.name})

    async def find_by_name(self, name: str) -> Optional[ProjectType]:
        """Case-insensitive exact lookup by name."""
        try:
            res = (
                self.supabase
                .table(self.table_name)
                .select("*")
                .ilike("name", escape_like(name))
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to look up project type '{name}': {e}", exc_info=True)
            raise DatabaseException(
                detail="Failed to retrieve project type",
                operation="find_by_name",
                table=self.table_name,
            )
        if not getattr(res, "data", None):
            return None
        return ProjectType.from_dict(res.data[0])

    async def find_or_create(self, project_type_create: ProjectTypeCreate) -> ProjectType:
        """Return the existing type with the same name (ignoring case) or create it."""
        existing = await self.find_by_name(project_type_create.name)
        if existing:
            return existing
        return await self.create(project_type_create)

