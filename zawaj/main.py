from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import IntegrityError

from zawaj.core.logging import setup_logging
from zawaj.core.init_db import init_db
from zawaj.core.errors import ZawajError
from zawaj.api.router import api_router

setup_logging()
logger.info("Starting Zawaj matching backend")


app = FastAPI(
    title="Zawaj Matching",
    version="0.1.0"
)


@app.exception_handler(ZawajError)
def zawaj_error_handler(request: Request, exc: ZawajError):
    logger.debug(f"{request.method} {request.url.path} -> {exc.kind}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"kind": "validation", "detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(IntegrityError)
def integrity_error_handler(request: Request, exc: IntegrityError):
    # the request session is rolled back when get_db closes it
    logger.warning(f"{request.method} {request.url.path} integrity error: {exc.orig}")
    return JSONResponse(status_code=409, content={"kind": "conflict", "detail": "Conflicting write"})


# Users, discovery, swipes, matches, messages, blocks, reports
app.include_router(api_router)

# Init DB after app is created
init_db()


@app.get("/health")
def health():
    logger.debug("Health check hit")
    return {"status": "ok"}
