import os
from dotenv import load_dotenv
from loguru import logger

load_dotenv()

def _get_env(key: str, default: str | None = None) -> str:
    val = os.getenv(key, default)
    if val is None:
        raise RuntimeError(f"Missing required env var: {key}")
    return val

def _get_bool(key: str, default: str) -> bool:
    return _get_env(key, default).strip().lower() in ("1", "true", "yes", "on")

APP_ENV = _get_env("APP_ENV", "local")
DATABASE_URL = _get_env("DATABASE_URL", "sqlite:///./zawaj.db")
LOG_LEVEL = _get_env("LOG_LEVEL", "DEBUG")
# empty string disables the rotating file sink
LOG_FILE = _get_env("LOG_FILE", "logs/app.log")

# "log" keeps the chat mirror local to the logs, "supabase" mirrors conversations
CHAT_SYNC_BACKEND = _get_env("CHAT_SYNC_BACKEND", "log").strip().lower()
GUARDIAN_CHAT_ALLOWED = _get_bool("GUARDIAN_CHAT_ALLOWED", "true")

SUPABASE_URL = _get_env("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE_KEY = _get_env("SUPABASE_SERVICE_ROLE_KEY", "")

logger.debug(
    f"Config loaded: APP_ENV={APP_ENV}, LOG_LEVEL={LOG_LEVEL}, "
    f"CHAT_SYNC_BACKEND={CHAT_SYNC_BACKEND}, GUARDIAN_CHAT_ALLOWED={GUARDIAN_CHAT_ALLOWED}"
)
