from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from loguru import logger

from zawaj.core.config import DATABASE_URL

# --- Base (single source of truth) ---
Base = declarative_base()


def make_engine(url: str, **kwargs) -> Engine:
    """Engine for ``url``; SQLite connections may be shared across threads."""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)

    eng = create_engine(url, echo=False, future=True, **kwargs)

    # --- SQL query logging ---
    @event.listens_for(eng, "before_cursor_execute")
    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        logger.trace(f"SQL: {statement} | params={parameters}")

    return eng


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, autoflush=False, autocommit=False, future=True)


engine = make_engine(DATABASE_URL)
SessionLocal = make_session_factory(engine)


# --- FastAPI dependency ---
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
