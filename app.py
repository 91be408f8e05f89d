from fastapi import FastAPI
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from config.config import settings, tags_metadata
from config.cors import configure_cors

from common.logging import setup_logging
from common.middleware import setup_middleware

setup_logging(
    level=settings.log_level,
    format_type=settings.log_format,
    log_file=settings.log_file,
)

limiter = Limiter(
    key_func=get_remote_address,
    headers_enabled=True,
    default_limits=[settings.rate_limit_default],
    storage_uri=settings.rate_limit_storage_uri,
    enabled=settings.rate_limit_enabled,
)

app = FastAPI(
    title=settings.api_docs.app_name,
    version="1.0.0",
    description="Projects, scripts and scenes with whitelisted ransack-style filtering",
    openapi_tags=tags_metadata,
    openapi_url=settings.api_docs.url,
    docs_url=settings.api_docs.docs_url,
    redoc_url=None,
    swagger_ui_parameters=settings.api_docs.swagger_ui_parameters(),
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

setup_middleware(app)
configure_cors(app)


# Import routers
from api.pages import router as pages_router
from api.health import router as health_router
from api.projects import router as projects_router
from api.project_types import router as project_types_router
from api.scripts import router as scripts_router
from api.scenes import router as scenes_router
from api.search_fields import router as search_fields_router

app.include_router(pages_router)

# Include all API routers with v1 prefix
app.include_router(health_router, prefix="/api/v1")
app.include_router(projects_router, prefix="/api/v1")
app.include_router(project_types_router, prefix="/api/v1")
app.include_router(scripts_router, prefix="/api/v1")
app.include_router(scenes_router, prefix="/api/v1")
app.include_router(search_fields_router, prefix="/api/v1")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
