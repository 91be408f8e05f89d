"""
Shared listing logic for entity services.
"""

import time
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Type

from common.logging import log_performance
from common.ransackable import RansackableModel
from common.responses import PaginatedResponse, Pagination, build_pagination
from common.search import build_search_query
from common.validation import validate_pagination_params
from config.config import settings
from repositories.base import SupabaseRepository


class SearchableService:
    """Service whose listings accept ransack-style `q` hashes."""

    model: Type[RansackableModel]

    def __init__(self, repository: SupabaseRepository):
        self.repository = repository

    async def _search(
        self,
        operation: str,
        q: Optional[Mapping[str, Any]] = None,
        page: int = 1,
        per_page: Optional[int] = None,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[Iterable[str]] = None,
    ) -> Tuple[List[Any], Pagination]:
        """Run a whitelisted search and return the page items with their pagination."""
        start_time = time.time()
        per_page = per_page or settings.default_per_page
        page, per_page = validate_pagination_params(page, per_page, settings.max_per_page)

        search = build_search_query(
            self.model,
            q,
            ignore_unknown_conditions=settings.search_ignore_unknown_conditions,
        )
        items, total = await self.repository.search(
            search,
            page=page,
            per_page=per_page,
            filters=filters,
            order_by=order_by,
        )

        duration_ms = (time.time() - start_time) * 1000
        log_performance(
            operation=operation,
            duration_ms=duration_ms,
            success=True,
            item_count=len(items),
            conditions=len(search.conditions) + len(search.any_of),
        )

        return items, build_pagination(page, per_page, total)

    async def _search_page(self, operation: str, q: Optional[Mapping[str, Any]] = None, page: int = 1,
                           per_page: Optional[int] = None, **kwargs: Any) -> PaginatedResponse:
        items, pagination = await self._search(operation, q, page, per_page, **kwargs)
        return PaginatedResponse(data=[item.to_dict() for item in items], pagination=pagination)
