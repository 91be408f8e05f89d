from typing import Any, Dict
from fastapi import APIRouter

from config.config import settings

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("/status",
    summary="Application health status",
    description="Liveness check. Reports whether Supabase credentials are present without querying the database."
)
def health_status() -> Dict[str, Any]:
    return {
        "status": "healthy",
        "service": settings.api_docs.app_name,
        "version": "1.0.0",
        "database": "configured" if settings.is_supabase_configured() else "not_configured",
        "docs": settings.api_docs.docs_url,
    }
