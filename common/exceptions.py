"""
Application exceptions.

Every exception carries a machine-readable ``error_code`` and a ``context``
dict; both end up in the JSON error body built by ``common.responses``.
"""

from typing import Optional, Dict, Any, Iterable
from fastapi import HTTPException, status


class BaseAPIException(HTTPException):
    """Base for errors rendered as the standard error body."""

    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code_default = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        detail: str,
        status_code: Optional[int] = None,
        headers: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code or self.status_code_default, detail=detail, headers=headers)
        self.error_code = error_code or self.error_code_default
        self.context = context or {}


class ValidationException(BaseAPIException):
    """Invalid request parameter that FastAPI's own validation cannot catch."""

    status_code_default = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_code_default = "VALIDATION_ERROR"

    def __init__(
        self,
        detail: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(
            detail=detail,
            error_code=error_code,
            context=context or {"field": field, "value": value}
        )


class UnpermittedSearchFieldException(ValidationException):
    """A `q` key names an attribute, association, scope or sort that is not ransackable."""

    def __init__(self, model: str, key: str, permitted: Optional[Iterable[str]] = None):
        super().__init__(
            detail=f"'{key}' is not a permitted search field for {model}",
            error_code="UNPERMITTED_SEARCH_FIELD",
            context={
                "model": model,
                "key": key,
                "permitted": sorted(permitted) if permitted is not None else None,
            }
        )


class ResourceNotFoundException(BaseAPIException):
    status_code_default = status.HTTP_404_NOT_FOUND
    error_code_default = "RESOURCE_NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            detail=f"{resource_type} with ID '{resource_id}' not found",
            context={"resource_type": resource_type, "resource_id": str(resource_id)}
        )


class ResourceConflictException(BaseAPIException):
    """The write would break a uniqueness rule, e.g. a scene number within a version."""

    status_code_default = status.HTTP_409_CONFLICT
    error_code_default = "RESOURCE_CONFLICT"

    def __init__(self, detail: str, resource_type: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            detail=detail,
            context={"resource_type": resource_type, **(context or {})}
        )


class BusinessLogicException(BaseAPIException):
    status_code_default = status.HTTP_400_BAD_REQUEST
    error_code_default = "BUSINESS_LOGIC_ERROR"

    def __init__(self, detail: str, error_code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(detail=detail, error_code=error_code, context=context)


class DatabaseException(BaseAPIException):
    """Supabase is unreachable, misconfigured or rejected the statement."""

    status_code_default = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code_default = "DATABASE_ERROR"

    def __init__(
        self,
        detail: str,
        operation: Optional[str] = None,
        table: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            detail=detail,
            context={"service_name": "database", "operation": operation, "table": table, **(context or {})}
        )
