"""FastAPI dependencies.

Components are built once by ``create_app`` and stored on ``app.state``;
these dependencies hand them to endpoints.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, Request

from filestore.auth import Authenticator
from filestore.config import Settings
from filestore.errors import UnauthorizedError
from filestore.storage import FileWriter


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_authenticator(request: Request) -> Authenticator:
    return request.app.state.authenticator


def get_file_writer(request: Request) -> FileWriter:
    return request.app.state.file_writer


def authenticate(
    authenticator: Annotated[Authenticator, Depends(get_authenticator)],
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Resolve the Authorization header to a username or fail with 401."""
    username = authenticator.authenticate(authorization)
    if username is None:
        raise UnauthorizedError()
    return username


SettingsDep = Annotated[Settings, Depends(get_settings_dep)]
FileWriterDep = Annotated[FileWriter, Depends(get_file_writer)]
AuthDep = Annotated[str, Depends(authenticate)]
