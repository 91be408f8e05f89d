import os
from collections import defaultdict

import pytest

# Settings are read at import time
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi.testclient import TestClient

from app import app
from dependencies import (
    get_project_service,
    get_project_type_service,
    get_scene_service,
    get_script_service,
)
from repositories.project_repository import ProjectRepository
from repositories.project_type_repository import ProjectTypeRepository
from repositories.scene_repository import SceneRepository
from repositories.script_repository import ScriptRepository
from services.project_service import ProjectService
from services.project_type_service import ProjectTypeService
from services.scene_service import SceneService
from services.script_service import ScriptService


class FakeResult:
    def __init__(self, data=None, count=None):
        self.data = data if data is not None else []
        self.count = count


class FakeQuery:
    """Records query-builder calls the way postgrest-py chains them."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.calls = []
        self._negate = False

    def _record(self, name, *args, **kwargs):
        if self._negate:
            name = f"not.{name}"
            self._negate = False
        self.calls.append((name, args, kwargs))
        return self

    @property
    def not_(self):
        self._negate = True
        return self

    def select(self, *args, **kwargs):
        return self._record("select", *args, **kwargs)

    def insert(self, *args, **kwargs):
        return self._record("insert", *args, **kwargs)

    def update(self, *args, **kwargs):
        return self._record("update", *args, **kwargs)

    def delete(self, *args, **kwargs):
        return self._record("delete", *args, **kwargs)

    def eq(self, *args):
        return self._record("eq", *args)

    def neq(self, *args):
        return self._record("neq", *args)

    def gt(self, *args):
        return self._record("gt", *args)

    def gte(self, *args):
        return self._record("gte", *args)

    def lt(self, *args):
        return self._record("lt", *args)

    def lte(self, *args):
        return self._record("lte", *args)

    def like(self, *args):
        return self._record("like", *args)

    def ilike(self, *args):
        return self._record("ilike", *args)

    def in_(self, *args):
        return self._record("in_", *args)

    def is_(self, *args):
        return self._record("is_", *args)

    def or_(self, *args, **kwargs):
        return self._record("or_", *args, **kwargs)

    def order(self, *args, **kwargs):
        return self._record("order", *args, **kwargs)

    def range(self, *args):
        return self._record("range", *args)

    def limit(self, *args):
        return self._record("limit", *args)

    def execute(self):
        return self.client.next_result(self.table)

    def called(self, name):
        return [args for call, args, _ in self.calls if call == name]


class FakeSupabase:
    """In-memory stand-in for the Supabase client; results are queued per table."""

    def __init__(self):
        self.queries = []
        self._results = defaultdict(list)
        self.fail = False

    def queue(self, table, data=None, count=None):
        self._results[table].append(FakeResult(data, count))

    def table(self, name):
        query = FakeQuery(self, name)
        self.queries.append(query)
        return query

    def next_result(self, table):
        if self.fail:
            raise ConnectionError("connection refused")
        if self._results[table]:
            return self._results[table].pop(0)
        return FakeResult([], 0)

    def last(self, table=None):
        queries = [q for q in self.queries if table is None or q.table == table]
        return queries[-1]


def project_row(**overrides):
    row = {
        "id": 1,
        "title": "Night Shift",
        "description": None,
        "status": "active",
        "budget": None,
        "project_type": "film",
        "company_id": 7,
        "created_by_user_id": "b1c2",
        "created_at": "2025-01-10T09:00:00Z",
        "updated_at": "2025-01-11T09:00:00Z",
    }
    row.update(overrides)
    return row


def script_row(**overrides):
    row = {
        "id": 10,
        "project_id": 1,
        "title": "Pilot",
        "script_type": "screenplay",
        "status": "draft",
        "description": None,
        "created_by_user_id": "b1c2",
        "created_at": "2025-01-12T09:00:00Z",
        "updated_at": "2025-01-12T09:00:00Z",
    }
    row.update(overrides)
    return row


def scene_row(**overrides):
    row = {
        "id": 100,
        "script_version_id": 5,
        "scene_number": 1,
        "slugline": "INT. KITCHEN - NIGHT",
        "content": "",
        "order": 1,
        "metadata": {},
        "created_at": "2025-01-12T09:00:00Z",
        "updated_at": "2025-01-12T09:00:00Z",
    }
    row.update(overrides)
    return row


@pytest.fixture()
def supabase():
    return FakeSupabase()


@pytest.fixture()
def client(supabase):
    project_repository = ProjectRepository(supabase)
    app.dependency_overrides[get_project_service] = lambda: ProjectService(project_repository)
    app.dependency_overrides[get_project_type_service] = lambda: ProjectTypeService(
        ProjectTypeRepository(supabase)
    )
    app.dependency_overrides[get_script_service] = lambda: ScriptService(
        ScriptRepository(supabase), project_repository
    )
    app.dependency_overrides[get_scene_service] = lambda: SceneService(SceneRepository(supabase))
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
