"""
Project service using Repository pattern.
"""

from typing import Any, Mapping, Optional

from entities.project import Project, ProjectCreate, ProjectUpdate
from repositories.project_repository import ProjectRepository
from common.exceptions import ResourceNotFoundException
from common.logging import log_entity_event
from common.responses import PaginatedResponse
from services.base import SearchableService


class ProjectService(SearchableService):
    """Business logic for projects."""

    model = Project

    def __init__(self, project_repository: ProjectRepository):
        super().__init__(project_repository)
        self.project_repository = project_repository

    async def list_projects(
        self,
        q: Optional[Mapping[str, Any]] = None,
        page: int = 1,
        per_page: Optional[int] = None,
    ) -> PaginatedResponse:
        return await self._search_page("list_projects", q, page, per_page)

    async def get_project(self, project_id: int) -> Project:
        return await self.project_repository.get_or_raise(project_id)

    async def create_project(self, project_create: ProjectCreate) -> Project:
        project = await self.project_repository.create(project_create)
        log_entity_event(
            entity_type="project",
            entity_id=project.id,
            action="created",
            user_id=project.created_by_user_id,
            details={"title": project.title, "project_type": project.project_type},
        )
        return project

    async def update_project(self, project_id: int, project_update: ProjectUpdate) -> Project:
        project = await self.project_repository.update(project_id, project_update)
        if project is None:
            raise ResourceNotFoundException(resource_type="Project", resource_id=project_id)
        log_entity_event(
            entity_type="project",
            entity_id=project_id,
            action="updated",
            details={"fields": sorted(project_update.model_dump(exclude_none=True))},
        )
        return project

    async def delete_project(self, project_id: int) -> bool:
        if not await self.project_repository.delete(project_id):
            raise ResourceNotFoundException(resource_type="Project", resource_id=project_id)
        log_entity_event(
            entity_type="project",
            entity_id=project_id,
            action="deleted",
        )
        return True


# Factory function
def create_project_service(project_repository: ProjectRepository) -> ProjectService:
    """Factory function to create ProjectService instance."""
    return ProjectService(project_repository)
