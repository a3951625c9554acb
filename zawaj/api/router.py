from fastapi import APIRouter

from zawaj.modules.blocks.routes import router as blocks_router
from zawaj.modules.discovery.routes import router as discovery_router
from zawaj.modules.matches.routes import router as matches_router
from zawaj.modules.messages.routes import router as messages_router
from zawaj.modules.reports.routes import router as reports_router
from zawaj.modules.swipes.routes import router as swipes_router
from zawaj.modules.users.routes import router as users_router

api_router = APIRouter()

api_router.include_router(users_router)
api_router.include_router(discovery_router)
api_router.include_router(swipes_router)
api_router.include_router(matches_router)
api_router.include_router(messages_router)
api_router.include_router(blocks_router)
api_router.include_router(reports_router)
