"""Static file serving from the file root.

GET requests behave like a plain directory server: files are returned with
``Last-Modified``/``ETag`` and Range support, directories get an ``index.html``
if present or a link listing otherwise.
"""

from __future__ import annotations

import html
import os
from pathlib import Path
from urllib.parse import quote

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse, RedirectResponse
from starlette.responses import Response

from filestore.api.dependencies import SettingsDep
from filestore.errors import NotFoundError
from filestore.validators.path import is_contained, join_under

router = APIRouter()

INDEX_FILE = "index.html"

# Common methods without a handler; create_app answers any other method the same way.
UNSUPPORTED_METHODS = ["PUT", "DELETE", "PATCH", "OPTIONS", "HEAD", "TRACE"]

METHOD_NOT_ALLOWED = "Method not allowed"


def render_listing(directory: Path) -> str:
    """Render a directory as an HTML list of links, sorted by name."""
    entries = []
    with os.scandir(directory) as it:
        for entry in it:
            name = entry.name + "/" if entry.is_dir() else entry.name
            entries.append(name)
    entries.sort()

    lines = ["<!doctype html>", '<meta name="viewport" content="width=device-width">', "<pre>"]
    for name in entries:
        lines.append(f'<a href="{html.escape(quote(name))}">{html.escape(name)}</a>')
    lines.append("</pre>")
    return "\n".join(lines) + "\n"


def _redirect(request: Request, path: str) -> RedirectResponse:
    if request.url.query:
        path = f"{path}?{request.url.query}"
    return RedirectResponse(path, status_code=301)


@router.get("/{full_path:path}", include_in_schema=False)
def serve_path(full_path: str, request: Request, settings: SettingsDep) -> Response:
    """Serve a file or directory listing from the file root."""
    root = settings.file_root
    target = join_under(root, full_path)
    if not is_contained(root, target, allow_root=True) or not target.exists():
        raise NotFoundError()

    url_path = request.url.path
    if target.is_dir():
        if not url_path.endswith("/"):
            return _redirect(request, url_path + "/")
        index = target / INDEX_FILE
        if index.is_file():
            return FileResponse(index)
        try:
            return HTMLResponse(render_listing(target))
        except PermissionError as e:
            raise NotFoundError() from e

    if url_path.endswith("/"):
        return _redirect(request, url_path.rstrip("/"))
    return FileResponse(target)


@router.api_route(
    "/{full_path:path}",
    methods=UNSUPPORTED_METHODS,
    include_in_schema=False,
)
async def method_not_allowed(full_path: str) -> PlainTextResponse:
    return PlainTextResponse(METHOD_NOT_ALLOWED, status_code=405)
