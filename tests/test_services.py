import pytest

from common.exceptions import ResourceConflictException, ResourceNotFoundException, ValidationException
from conftest import project_row, scene_row
from entities.project import ProjectUpdate
from entities.scene import SceneUpdate
from entities.script import ScriptCreate
from repositories.project_repository import ProjectRepository
from repositories.project_type_repository import ProjectTypeRepository
from repositories.scene_repository import SceneRepository
from repositories.script_repository import ScriptRepository
from services.project_service import create_project_service
from services.project_type_service import create_project_type_service
from services.scene_service import create_scene_service
from services.script_service import create_script_service


@pytest.mark.asyncio
async def test_list_projects_returns_page_with_pagination(supabase):
    supabase.queue("projects", [project_row(), project_row(id=2)], count=5)
    service = create_project_service(ProjectRepository(supabase))

    page = await service.list_projects(q={"active": "1"}, page=1, per_page=2)

    assert [p["id"] for p in page.data] == [1, 2]
    assert page.data[0]["created_at"].startswith("2025-01-10")
    assert page.pagination.total == 5
    assert page.pagination.total_pages == 3
    assert page.pagination.has_next and not page.pagination.has_prev
    assert supabase.last().called("eq") == [("status", "active")]


@pytest.mark.asyncio
async def test_list_projects_rejects_oversized_page(supabase):
    service = create_project_service(ProjectRepository(supabase))

    with pytest.raises(ValidationException):
        await service.list_projects(per_page=1000)


@pytest.mark.asyncio
async def test_update_and_delete_missing_project(supabase):
    service = create_project_service(ProjectRepository(supabase))

    with pytest.raises(ResourceNotFoundException):
        await service.update_project(5, ProjectUpdate(title="x"))
    with pytest.raises(ResourceNotFoundException):
        await service.delete_project(5)


@pytest.mark.asyncio
async def test_list_scripts_requires_existing_project(supabase):
    service = create_script_service(ScriptRepository(supabase), ProjectRepository(supabase))

    with pytest.raises(ResourceNotFoundException) as exc_info:
        await service.list_scripts(project_id=42)

    assert exc_info.value.context["resource_type"] == "Project"


@pytest.mark.asyncio
async def test_create_script_checks_project(supabase):
    service = create_script_service(ScriptRepository(supabase), ProjectRepository(supabase))

    with pytest.raises(ResourceNotFoundException):
        await service.create_script(ScriptCreate(project_id=42, title="Pilot"))

    assert all(not q.called("insert") for q in supabase.queries)


@pytest.mark.asyncio
async def test_search_project_types_uses_name_order_and_limit(supabase):
    supabase.queue("project_types", [{"id": 1, "name": "Documentary"}], count=1)
    service = create_project_type_service(ProjectTypeRepository(supabase))

    results = await service.search_project_types("doc", limit=5)

    query = supabase.last()
    assert [r.name for r in results] == ["Documentary"]
    assert query.called("ilike") == [("name", "%doc%")]
    assert query.called("order") == [("name",)]
    assert query.called("range") == [(0, 4)]


@pytest.mark.asyncio
async def test_list_scenes_defaults(supabase):
    supabase.queue("scenes", [scene_row()], count=1)
    service = create_scene_service(SceneRepository(supabase))

    page = await service.list_scenes(5)

    query = supabase.last()
    assert query.called("eq") == [("script_version_id", 5)]
    assert query.called("order") == [("order",), ("scene_number",)]
    assert page.pagination.per_page == 100


@pytest.mark.asyncio
async def test_update_and_delete_missing_scene(supabase):
    service = create_scene_service(SceneRepository(supabase))

    with pytest.raises(ResourceNotFoundException):
        await service.update_scene(9, SceneUpdate(slugline="INT. HALL - DAY"))
    with pytest.raises(ResourceNotFoundException):
        await service.update_scene(9, SceneUpdate(scene_number=4))
    with pytest.raises(ResourceNotFoundException):
        await service.delete_scene(9)


@pytest.mark.asyncio
async def test_update_scene_number_checks_its_own_version(supabase):
    supabase.queue("scenes", [scene_row(script_version_id=8, scene_number=2)])
    supabase.queue("scenes", [], count=1)
    service = create_scene_service(SceneRepository(supabase))

    with pytest.raises(ResourceConflictException):
        await service.update_scene(100, SceneUpdate(scene_number=3))

    count_query = supabase.last("scenes")
    assert count_query.called("eq") == [("script_version_id", 8), ("scene_number", 3)]
