"""
Base repository interface and abstract classes for the Repository pattern.
"""

from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Optional, List, Dict, Any, Iterable, Tuple, Type
from datetime import datetime, timezone

from common.exceptions import DatabaseException, ResourceNotFoundException
from common.logging import get_logger
from common.search import SearchQuery
from entities.base import Entity

# Generic type for entity models
T = TypeVar('T', bound=Entity)

logger = get_logger("repository")

OR_OPERATORS = ("eq", "neq", "gt", "gte", "lt", "lte", "like", "ilike")
# Characters PostgREST treats as syntax inside `or=(...)`
OR_RESERVED = frozenset(',.:()" \\')


def _or_value(value: Any) -> str:
    text = str(value)
    if any(ch in OR_RESERVED for ch in text):
        return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return text


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository interface defining common CRUD operations.
    """

    @abstractmethod
    async def create(self, entity: Any) -> T:
        """Create a new entity."""
        pass

    @abstractmethod
    async def get_by_id(self, entity_id: int) -> Optional[T]:
        """Retrieve an entity by its ID."""
        pass

    @abstractmethod
    async def update(self, entity_id: int, update_data: Any) -> Optional[T]:
        """Update an entity by its ID."""
        pass

    @abstractmethod
    async def delete(self, entity_id: int) -> bool:
        """Delete an entity by its ID."""
        pass

    @abstractmethod
    async def search(
        self,
        search: Optional[SearchQuery] = None,
        page: int = 1,
        per_page: int = 20,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[Iterable[str]] = None,
    ) -> Tuple[List[T], int]:
        """Return one page of entities matching the search and the total match count."""
        pass

    @abstractmethod
    async def exists(self, entity_id: int) -> bool:
        """Check if an entity exists by its ID."""
        pass

    @abstractmethod
    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """Count entities with optional filtering."""
        pass


class SupabaseRepository(BaseRepository[T], ABC):
    """
    Base Supabase repository implementation with common functionality.
    """

    entity_class: Type[T]
    default_order_by: Tuple[str, ...] = ("-created_at",)

    def __init__(self, supabase_client, table_name: str):
        self.supabase = supabase_client
        self.table_name = table_name

    def _add_audit_fields(self, data: Dict[str, Any], is_update: bool = False) -> Dict[str, Any]:
        """Add audit fields to entity data."""
        now = datetime.now(timezone.utc).isoformat()

        if not is_update:
            data["created_at"] = now

        data["updated_at"] = now
        return data

    def _association_select(self, association: str) -> str:
        """Embedded resource used when filtering through `association`."""
        return f"{association}!inner(id)"

    def _select_clause(self, search: Optional[SearchQuery]) -> str:
        if not search or not search.associations:
            return "*"
        embeds = [self._association_select(name) for name in search.associations]
        return ", ".join(["*"] + embeds)

    def _apply_operator(self, query, field: str, operator: str, value: Any):
        """Apply a single comparison to a Supabase query."""
        if operator == "eq":
            return query.eq(field, value)
        if operator == "neq":
            return query.neq(field, value)
        if operator == "gt":
            return query.gt(field, value)
        if operator == "gte":
            return query.gte(field, value)
        if operator == "lt":
            return query.lt(field, value)
        if operator == "lte":
            return query.lte(field, value)
        if operator == "like":
            return query.like(field, value)
        if operator == "ilike":
            return query.ilike(field, value)
        if operator == "in":
            return query.in_(field, list(value))
        if operator == "not_in":
            return query.not_.in_(field, list(value))
        if operator == "is":
            return query.is_(field, "null")
        if operator == "not_is":
            return query.not_.is_(field, "null")
        raise ValueError(f"Unsupported filter operator: {operator}")

    def _or_clause(self, field: str, operator: str, value: Any) -> str:
        """One member of a PostgREST `or=(...)` filter, e.g. `title.ilike.%pilot%`."""
        if operator in ("in", "not_in"):
            items = ",".join(_or_value(item) for item in value)
            negate = "not." if operator == "not_in" else ""
            return f"{field}.{negate}in.({items})"
        if operator == "is":
            return f"{field}.is.null"
        if operator == "not_is":
            return f"{field}.not.is.null"
        if operator in OR_OPERATORS:
            return f"{field}.{operator}.{_or_value(value)}"
        raise ValueError(f"Unsupported filter operator: {operator}")

    def _build_filters(self, query, filters: Optional[Dict[str, Any]]):
        """Apply filters to a Supabase query."""
        if not filters:
            return query

        for field, value in filters.items():
            if isinstance(value, list):
                query = query.in_(field, value)
            elif isinstance(value, dict):
                # Handle complex filters like ranges, comparisons
                for operator, filter_value in value.items():
                    query = self._apply_operator(query, field, operator, filter_value)
            else:
                query = query.eq(field, value)

        return query

    def _apply_search(self, query, search: Optional[SearchQuery]):
        """Apply validated search conditions and scopes."""
        if not search:
            return query
        for condition in search.conditions:
            query = self._apply_operator(query, condition.column, condition.operator, condition.value)
        for group in search.any_of:
            clauses = [self._or_clause(c.column, c.operator, c.value) for c in group.conditions]
            query = query.or_(",".join(clauses))
        for scope in search.scopes:
            query = self._build_filters(query, scope.filters)
        return query

    def _apply_ordering(self, query, order_by: Optional[Iterable[str]]):
        """Apply ordering to a Supabase query; `-field` sorts descending."""
        for field in (list(order_by or []) or list(self.default_order_by)):
            if field.startswith("-"):
                query = query.order(field[1:], desc=True)
            else:
                query = query.order(field, desc=False)
        return query

    async def get_by_id(self, entity_id: int) -> Optional[T]:
        """Retrieve a single row by ID."""
        try:
            res = (
                self.supabase
                .table(self.table_name)
                .select("*")
                .eq("id", entity_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to get {self.table_name} row {entity_id}: {e}", exc_info=True)
            raise DatabaseException(
                detail=f"Failed to retrieve {self.entity_class.__name__}",
                operation="get_by_id",
                table=self.table_name,
            )
        if not getattr(res, "data", None):
            return None
        return self.entity_class.from_dict(res.data[0])

    async def get_or_raise(self, entity_id: int) -> T:
        entity = await self.get_by_id(entity_id)
        if entity is None:
            raise ResourceNotFoundException(
                resource_type=self.entity_class.__name__,
                resource_id=entity_id,
            )
        return entity

    async def _insert(self, payload: Dict[str, Any]) -> T:
        payload = self._add_audit_fields(payload)
        try:
            result = self.supabase.table(self.table_name).insert(payload).execute()
        except Exception as e:
            logger.error(f"Failed to insert into {self.table_name}: {e}", exc_info=True)
            raise DatabaseException(
                detail=f"Failed to create {self.entity_class.__name__}",
                operation="insert",
                table=self.table_name,
            )
        if not getattr(result, "data", None):
            raise DatabaseException(
                detail=f"Failed to create {self.entity_class.__name__}",
                operation="insert",
                table=self.table_name,
            )
        return self.entity_class.from_dict(result.data[0])

    async def update(self, entity_id: int, update_data: Any) -> Optional[T]:
        """Update provided (non-None) fields of a row."""
        if not await self.exists(entity_id):
            raise ResourceNotFoundException(
                resource_type=self.entity_class.__name__,
                resource_id=entity_id,
            )

        if hasattr(update_data, "model_dump"):
            update_data = update_data.model_dump(mode="json")
        update_dict = {k: v for k, v in update_data.items() if v is not None}
        if not update_dict:
            return await self.get_by_id(entity_id)

        update_dict = self._add_audit_fields(update_dict, is_update=True)
        try:
            res = (
                self.supabase
                .table(self.table_name)
                .update(update_dict)
                .eq("id", entity_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update {self.table_name} row {entity_id}: {e}", exc_info=True)
            raise DatabaseException(
                detail=f"Failed to update {self.entity_class.__name__}",
                operation="update",
                table=self.table_name,
                context={"id": entity_id},
            )
        if not getattr(res, "data", None):
            return None
        return self.entity_class.from_dict(res.data[0])

    async def search(
        self,
        search: Optional[SearchQuery] = None,
        page: int = 1,
        per_page: int = 20,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[Iterable[str]] = None,
    ) -> Tuple[List[T], int]:
        """
        Run a search and return one page of entities plus the total count.

        Ransack sorts (`q[s]`) take precedence over `order_by`.
        """
        try:
            query = (
                self.supabase
                .table(self.table_name)
                .select(self._select_clause(search), count="exact")
            )
            query = self._build_filters(query, filters)
            query = self._apply_search(query, search)
            sorts = search.order_by() if search and search.sorts else order_by
            query = self._apply_ordering(query, sorts)

            offset = (page - 1) * per_page
            query = query.range(offset, offset + per_page - 1)
            result = query.execute()
        except ValueError:
            raise
        except Exception as e:
            logger.error(f"Failed to search {self.table_name}: {e}", exc_info=True)
            raise DatabaseException(
                detail=f"Failed to retrieve {self.entity_class.__name__} records",
                operation="search",
                table=self.table_name,
            )

        rows = getattr(result, "data", None) or []
        items = [self.entity_class.from_dict(self._strip_embeds(row, search)) for row in rows]
        total = getattr(result, "count", None)
        if total is None:
            total = offset + len(items)

        logger.debug(
            f"Searched {self.table_name}: {len(items)} of {total}",
            extra={"table": self.table_name, "page": page, "per_page": per_page}
        )
        return items, total

    def _strip_embeds(self, row: Dict[str, Any], search: Optional[SearchQuery]) -> Dict[str, Any]:
        if not search or not search.associations:
            return row
        return {k: v for k, v in row.items() if k not in search.associations}

    async def delete(self, entity_id: int) -> bool:
        """Default hard delete by ID. Returns True if a record was deleted."""
        try:
            res = (
                self.supabase
                .table(self.table_name)
                .delete()
                .eq("id", entity_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to delete {self.table_name} row {entity_id}: {e}", exc_info=True)
            raise DatabaseException(
                detail=f"Failed to delete {self.entity_class.__name__}",
                operation="delete",
                table=self.table_name,
                context={"id": entity_id},
            )
        # Supabase python client returns deleted rows in data
        return bool(getattr(res, "data", None))

    async def exists(self, entity_id: int) -> bool:
        """Check if an entity exists by its ID."""
        try:
            result = self.supabase.table(self.table_name)\
                .select("id")\
                .eq("id", entity_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Failed to check {self.table_name} row {entity_id}: {e}", exc_info=True)
            raise DatabaseException(
                detail=f"Failed to check {self.entity_class.__name__}",
                operation="exists",
                table=self.table_name,
            )
        return bool(result.data)

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """Count entities with optional filtering."""
        try:
            query = self.supabase.table(self.table_name).select("id", count="exact")
            query = self._build_filters(query, filters or {})
            result = query.execute()
        except Exception as e:
            logger.error(f"Failed to count {self.table_name}: {e}", exc_info=True)
            raise DatabaseException(
                detail=f"Failed to count {self.entity_class.__name__} records",
                operation="count",
                table=self.table_name,
            )
        return result.count or 0
