import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from character_chat.core.logging_config import setup_logging
from character_chat.core.exceptions import CharacterChatError

setup_logging()

from character_chat.database import Base, engine
from character_chat import models  # noqa: F401  registers tables on Base.metadata
from character_chat.routers import auth
from character_chat.routers import characters as characters_router
from character_chat.routers import sessions as sessions_router

logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)
app = FastAPI(title="Character Chat API")

app.include_router(auth.router)
app.include_router(characters_router.router)
app.include_router(sessions_router.router)


@app.exception_handler(CharacterChatError)
async def character_chat_error_handler(request: Request, exc: CharacterChatError):
    """Translate domain errors into their HTTP status with a stable error code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.code}: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.code, "detail": exc.message},
        headers=headers,
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Hide internal error details from clients."""
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"code": "INTERNAL_ERROR", "detail": "Internal server error"}
    )


@app.get("/")
async def root():
    return {"message": "Hello, Character Chat here!"}
