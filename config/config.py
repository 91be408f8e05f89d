from typing import Any, Dict, List, Optional
from pydantic_settings import BaseSettings
from pydantic import BaseModel, Field, field_validator


class ApiDocsSettings(BaseModel):
    """Static configuration for the Swagger documentation UI."""

    url: str = Field("/api/v1/swagger_doc", description="Path of the OpenAPI document")
    app_url: str = Field("/", description="Base path of the application")
    app_name: str = Field("Script Generation API", description="Title shown in the docs UI")
    doc_expansion: str = Field("list", description="Initial expansion of operations: list, full or none")
    hide_url_input: bool = Field(False, description="Whether the document URL can be changed from the UI")

    @field_validator('doc_expansion')
    @classmethod
    def validate_doc_expansion(cls, v):
        if v not in ("list", "full", "none"):
            raise ValueError("doc_expansion must be one of: list, full, none")
        return v

    @property
    def docs_url(self) -> str:
        return self.app_url.rstrip("/") + "/docs"

    def swagger_ui_parameters(self) -> Dict[str, Any]:
        return {
            "docExpansion": self.doc_expansion,
            "queryConfigEnabled": not self.hide_url_input,
        }


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = Field("", env="SUPABASE_URL")
    supabase_key: str = Field("", env="SUPABASE_KEY")
    supabase_table_projects: str = Field("projects", env="SUPABASE_TABLE_PROJECTS")
    supabase_table_project_types: str = Field("project_types", env="SUPABASE_TABLE_PROJECT_TYPES")
    supabase_table_scripts: str = Field("scripts", env="SUPABASE_TABLE_SCRIPTS")
    supabase_table_scenes: str = Field("scenes", env="SUPABASE_TABLE_SCENES")

    # Pagination
    default_per_page: int = Field(20, env="DEFAULT_PER_PAGE")
    scenes_per_page: int = Field(100, env="SCENES_PER_PAGE")
    max_per_page: int = Field(100, env="MAX_PER_PAGE")
    project_types_limit: int = Field(20, env="PROJECT_TYPES_LIMIT")

    # Search
    search_ignore_unknown_conditions: bool = Field(False, env="SEARCH_IGNORE_UNKNOWN_CONDITIONS")

    # Logging
    log_level: str = Field("INFO", env="LOG_LEVEL")
    log_format: str = Field("structured", env="LOG_FORMAT")
    log_file: Optional[str] = Field(None, env="LOG_FILE")

    # Rate limiting
    rate_limit_enabled: bool = Field(True, env="RATE_LIMIT_ENABLED")
    rate_limit_storage_uri: Optional[str] = Field(None, env="RATE_LIMIT_STORAGE_URI")
    rate_limit_default: str = Field("200/minute", env="RATE_LIMIT_DEFAULT")

    # CORS
    cors_origins: List[str] = Field(default=["http://localhost:3000"], env="CORS_ORIGINS")

    # Documentation UI
    api_docs: ApiDocsSettings = Field(default_factory=ApiDocsSettings)

    class Config:
        env_file = ".env"
        env_nested_delimiter = "__"
        extra = "ignore"

    def is_supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

settings = Settings()

tags_metadata = [
    {
        "name": "Health",
        "description": "Health-check and diagnostics endpoints.",
    },
    {
        "name": "Projects",
        "description": "Project management operations.",
    },
    {
        "name": "Project Types",
        "description": "Search and create project types.",
    },
    {
        "name": "Scripts",
        "description": "Script listing and creation.",
    },
    {
        "name": "Scenes",
        "description": "Scenes of a script version.",
    },
    {
        "name": "Search",
        "description": "Filterable fields exposed to ransack-style `q` parameters.",
    },
]
