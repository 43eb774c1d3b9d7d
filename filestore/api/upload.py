"""Upload endpoint.

Intended as a receiver for POST requests from CI tools::

    curl -X POST -H "Authorization: Bearer <token>" \\
        -F file0=@var.tar.gz -F file1=@x.bin -F path=builds/42 \\
        http://remotehost/anypath

Every file part of the form is stored, whatever its field name. Processing
stops at the first failing file; files stored before it are kept.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import FormData, UploadFile
from starlette.formparsers import MultiPartException, MultiPartParser

from filestore.api.dependencies import AuthDep, FileWriterDep, SettingsDep
from filestore.config import UploadConfig
from filestore.errors import MalformedRequestError

logger = structlog.get_logger()

router = APIRouter()

PATH_FIELD = "path"


async def parse_multipart(request: Request, config: UploadConfig) -> FormData:
    """Parse the request body as multipart/form-data.

    Parts larger than ``config.memory_limit`` spill to temporary files.

    Raises:
        MalformedRequestError: If the body is not a valid multipart form
    """
    content_type = request.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type != "multipart/form-data":
        raise MalformedRequestError("request Content-Type isn't multipart/form-data")
    if "boundary=" not in content_type.lower():
        raise MalformedRequestError("no multipart boundary param in Content-Type")

    parser = MultiPartParser(
        request.headers,
        request.stream(),
        max_files=config.max_files,
        max_fields=config.max_files,
        max_part_size=config.memory_limit,
    )
    parser.spool_max_size = config.memory_limit
    try:
        return await parser.parse()
    except MultiPartException as e:
        raise MalformedRequestError(e.message) from e
    except ValueError as e:
        # python-multipart reports malformed bodies as ValueError subclasses
        raise MalformedRequestError(str(e) or "malformed multipart body") from e


def path_value(form: FormData) -> str | None:
    """First non-file ``path`` field of the form, if any."""
    for value in form.getlist(PATH_FIELD):
        if isinstance(value, str):
            return value
    return None


def file_fields(form: FormData) -> list[tuple[str, UploadFile]]:
    """All file parts of the form. Order is not part of the contract."""
    return [(name, value) for name, value in form.multi_items() if isinstance(value, UploadFile)]


@router.post("/{full_path:path}", include_in_schema=False)
async def upload_files(
    full_path: str,
    request: Request,
    username: AuthDep,
    settings: SettingsDep,
    writer: FileWriterDep,
) -> JSONResponse:
    """Store every uploaded file under the caller's directory.

    Responses:
    - 200 ``{"status": "ok"}`` when all files are stored
    - 400 on a malformed form or rejected filename/path
    - 401 on missing or unknown credentials
    - 500 on storage failure
    """
    log = logger.bind(username=username, request_path="/" + full_path)

    form = await parse_multipart(request, settings.upload)
    try:
        sub_path = path_value(form)
        fields = file_fields(form)
        log.info("upload.start", files=len(fields), sub_path=sub_path)

        for field_name, upload in fields:
            try:
                await writer.write_file(username, sub_path, upload)
            except Exception as e:
                log.warning(
                    "upload.failed",
                    field=field_name,
                    filename=upload.filename,
                    error=str(e),
                )
                raise
    finally:
        await form.close()

    log.info("upload.complete", files=len(fields))
    return JSONResponse({"status": "ok"})
