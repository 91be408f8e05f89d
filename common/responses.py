"""
Response envelopes: the error body shared by every failure and the page
wrapper returned by listings.
"""

from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
from pydantic import BaseModel
from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from common.logging import request_id_var


class ErrorDetail(BaseModel):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""
    success: bool = False
    error: ErrorDetail
    validation_errors: Optional[List[Dict[str, Any]]] = None
    request_id: Optional[str] = None
    timestamp: str


class Pagination(BaseModel):
    page: int
    per_page: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class PaginatedResponse(BaseModel):
    """One page of records plus pagination metadata."""
    data: List[Dict[str, Any]]
    pagination: Pagination


def build_pagination(page: int, per_page: int, total: int) -> Pagination:
    total_pages = -(-total // per_page) if per_page else 0
    return Pagination(
        page=page,
        per_page=per_page,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )


def _error_body(error: ErrorDetail, validation_errors: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    body = ErrorResponse(
        error=error,
        validation_errors=validation_errors,
        request_id=request_id_var.get(),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
    return jsonable_encoder(body, exclude_none=True)


def create_error_response(
    error_code: str,
    message: str,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    context: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    content = _error_body(ErrorDetail(code=error_code, message=message, context=context or None))
    return JSONResponse(content=content, status_code=status_code, headers=headers)


def create_validation_error_response(
    validation_errors: List[Dict[str, Any]],
    message: str = "Request validation failed"
) -> JSONResponse:
    content = _error_body(
        ErrorDetail(code="VALIDATION_ERROR", message=message),
        validation_errors=jsonable_encoder(validation_errors),
    )
    return JSONResponse(content=content, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)


def _error_example(code: str, message: str) -> Dict[str, Any]:
    return {
        "application/json": {
            "example": {
                "success": False,
                "error": {"code": code, "message": message},
                "request_id": "550e8400-e29b-41d4-a716-446655440000",
                "timestamp": "2025-12-01T10:00:00Z"
            }
        }
    }


# Spread into a route's `responses=`
COMMON_RESPONSES = {
    "not_found": {
        404: {
            "description": "Resource not found",
            "model": ErrorResponse,
            "content": _error_example("RESOURCE_NOT_FOUND", "Project with ID '42' not found"),
        }
    },
    "validation_error": {
        422: {
            "description": "Validation error or unpermitted search field",
            "model": ErrorResponse,
            "content": _error_example("UNPERMITTED_SEARCH_FIELD", "'secret_eq' is not a permitted search field for Script"),
        }
    },
    "conflict": {
        409: {
            "description": "Resource conflict",
            "model": ErrorResponse,
            "content": _error_example("RESOURCE_CONFLICT", "Scene number 3 already exists in this version"),
        }
    },
}
