from supabase import Client, create_client

from common.exceptions import DatabaseException
from common.logging import get_logger
from config.config import settings

logger = get_logger("supabase_client")


def create_supabase_client() -> Client:
    """Create a Supabase client from settings."""
    if not settings.is_supabase_configured():
        raise DatabaseException(
            detail="Supabase is not configured (SUPABASE_URL / SUPABASE_KEY)",
            operation="connect",
        )
    logger.info("Creating Supabase client", extra={"supabase_url": settings.supabase_url})
    return create_client(settings.supabase_url, settings.supabase_key)
