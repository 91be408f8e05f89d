"""
Dependency injection setup for repositories and services.
"""

from functools import lru_cache
from typing import Annotated
from fastapi import Depends

from db.supabase_client import create_supabase_client
from repositories.project_repository import ProjectRepository
from repositories.project_type_repository import ProjectTypeRepository
from repositories.script_repository import ScriptRepository
from repositories.scene_repository import SceneRepository
from services.project_service import ProjectService, create_project_service
from services.project_type_service import ProjectTypeService, create_project_type_service
from services.script_service import ScriptService, create_script_service
from services.scene_service import SceneService, create_scene_service
from config.config import settings


@lru_cache()
def get_supabase_client():
    """Get singleton Supabase client."""
    return create_supabase_client()


@lru_cache()
def get_project_repository() -> ProjectRepository:
    """Get singleton Project repository."""
    supabase = get_supabase_client()
    return ProjectRepository(supabase, settings.supabase_table_projects)


@lru_cache()
def get_project_type_repository() -> ProjectTypeRepository:
    """Get singleton ProjectType repository."""
    supabase = get_supabase_client()
    return ProjectTypeRepository(supabase, settings.supabase_table_project_types)


@lru_cache()
def get_script_repository() -> ScriptRepository:
    """Get singleton Script repository."""
    supabase = get_supabase_client()
    return ScriptRepository(supabase, settings.supabase_table_scripts, settings.supabase_table_projects)


@lru_cache()
def get_scene_repository() -> SceneRepository:
    """Get singleton Scene repository."""
    supabase = get_supabase_client()
    return SceneRepository(supabase, settings.supabase_table_scenes)


@lru_cache()
def get_project_service() -> ProjectService:
    """Get singleton ProjectService with dependencies."""
    return create_project_service(get_project_repository())


@lru_cache()
def get_project_type_service() -> ProjectTypeService:
    """Get singleton ProjectTypeService with dependencies."""
    return create_project_type_service(get_project_type_repository())


@lru_cache()
def get_script_service() -> ScriptService:
    """Get singleton ScriptService with dependencies."""
    return create_script_service(get_script_repository(), get_project_repository())


@lru_cache()
def get_scene_service() -> SceneService:
    """Get singleton SceneService with dependencies."""
    return create_scene_service(get_scene_repository())


# Dependency annotations for FastAPI
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
ProjectTypeServiceDep = Annotated[ProjectTypeService, Depends(get_project_type_service)]
ScriptServiceDep = Annotated[ScriptService, Depends(get_script_service)]
SceneServiceDep = Annotated[SceneService, Depends(get_scene_service)]
