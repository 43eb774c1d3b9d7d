"""Filestore application factory."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from filestore import __version__
from filestore.api.files import METHOD_NOT_ALLOWED
from filestore.api.files import router as files_router
from filestore.api.upload import router as upload_router
from filestore.auth import Authenticator, CredentialStore
from filestore.config import Settings, get_settings
from filestore.errors import FileStoreError
from filestore.storage import FileWriter

logger = structlog.get_logger()


async def filestore_error_handler(request: Request, exc: FileStoreError) -> PlainTextResponse:
    """Render request errors as a status code plus short text body."""
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Answer every unrouted method with the plain-text 405 body."""
    if exc.status_code == 405:
        return PlainTextResponse(METHOD_NOT_ALLOWED, status_code=405)
    return await http_exception_handler(request, exc)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the ASGI application.

    Settings are resolved once here and every component receives them
    explicitly; nothing reads configuration at request time.
    """
    if settings is None:
        settings = get_settings()

    # Every path belongs to the file tree, so no docs routes.
    app = FastAPI(
        title="filestore",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    credentials = CredentialStore(settings.users)
    app.state.settings = settings
    app.state.credentials = credentials
    app.state.authenticator = Authenticator(credentials)
    app.state.file_writer = FileWriter(settings.file_root, settings.upload)

    app.add_exception_handler(FileStoreError, filestore_error_handler)
    app.add_exception_handler(StarletteHTTPException, method_not_allowed_handler)

    app.include_router(upload_router)
    app.include_router(files_router)

    logger.info(
        "app.created",
        filedir=settings.filedir,
        users=len(credentials),
        path_policy=settings.upload.path_policy,
    )
    return app
