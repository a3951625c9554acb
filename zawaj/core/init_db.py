from loguru import logger
from zawaj.core.db import engine, Base

# Import all models so SQLAlchemy registers them
from zawaj.models.user import User, Photo
from zawaj.models.preference import Preference
from zawaj.models.swipe import Swipe
from zawaj.models.block import Block
from zawaj.models.discovery_seen import DiscoverySeen
from zawaj.models.match import Match, Message, AuditLog
from zawaj.models.report import Report


def init_db(bind=None):
    logger.info("Creating database tables")
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables created")
