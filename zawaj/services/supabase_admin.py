from functools import lru_cache

from loguru import logger
from supabase import Client, create_client

from zawaj.core.config import SUPABASE_SERVICE_ROLE_KEY, SUPABASE_URL


@lru_cache(maxsize=1)
def supabase_admin() -> Client:
    """Service-role client for the chat mirror tables."""
    if not SUPABASE_URL or not SUPABASE_SERVICE_ROLE_KEY:
        raise RuntimeError(
            "CHAT_SYNC_BACKEND=supabase needs SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY"
        )
    logger.info(f"[supabase] creating admin client for {SUPABASE_URL}")
    return create_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)
