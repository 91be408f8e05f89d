"""
Project type service using Repository pattern.
"""

from typing import List, Optional

from entities.project_type import ProjectType, ProjectTypeCreate
from repositories.project_type_repository import ProjectTypeRepository
from common.logging import log_entity_event
from services.base import SearchableService



class ProjectTypeService(SearchableService):
    """Search and find-or-create for project types."""

    model = ProjectType

    def __init__(self, project_type_repository: ProjectTypeRepository):
        super().__init__(project_type_repository)
        self.project_type_repository = project_type_repository

    async def search_project_types(self, term: Optional[str] = None, limit: int = 20) -> List[ProjectType]:
        """Alphabetical project types, optionally narrowed by a name fragment."""
        items, _ = await self._search(
            "search_project_types",
            q={"search": term} if term else None,
            page=1,
            per_page=limit,
            order_by=["name"],
        )
        return items

    async def find_or_create(self, project_type_create: ProjectTypeCreate) -> ProjectType:
        project_type = await self.project_type_repository.find_or_create(project_type_create)
        log_entity_event(
            entity_type="project_type",
            entity_id=project_type.id,
            action="resolved",
            details={"name": project_type.name},
        )
        return project_type


def create_project_type_service(project_type_repository: ProjectTypeRepository) -> ProjectTypeService:
    """Factory function to create ProjectTypeService instance."""
    return ProjectTypeService(project_type_repository)
