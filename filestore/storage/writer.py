"""FileWriter - materializes uploaded files under a user's directory.

Layout: ``<filedir>/<username>/<path>/<filename>``. Existing files are
truncated and overwritten. A failed copy leaves the partial file in place.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

import structlog
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from filestore.config import UploadConfig
from filestore.errors import MalformedRequestError, StorageError
from filestore.validators.path import is_contained, is_valid_segment, join_under

logger = structlog.get_logger()


class FileWriter:
    """Validates destinations and streams uploads to disk."""

    def __init__(self, root: Path, config: UploadConfig) -> None:
        self._root = root
        self._config = config
        self._log = logger.bind(component="file_writer")

    @property
    def strict(self) -> bool:
        return self._config.path_policy == "strict"

    def destination(self, username: str, path_field: str | None, filename: str | None) -> Path:
        """Compute and validate the destination of one uploaded file.

        Args:
            username: Authenticated user
            path_field: Value of the ``path`` form field, if any
            filename: Client-declared filename

        Returns:
            Destination file path

        Raises:
            MalformedRequestError: If the filename or path is rejected
        """
        if filename is None or not is_valid_segment(filename):
            raise MalformedRequestError("Invalid filename")

        sub_path = path_field or ""
        if sub_path and not is_valid_segment(sub_path):
            raise MalformedRequestError("Invalid path")

        user_dir = join_under(self._root, username)
        target_dir = join_under(user_dir, sub_path)
        destination = join_under(target_dir, filename)

        if self.strict:
            if not is_contained(user_dir, target_dir, allow_root=True):
                raise MalformedRequestError("Invalid path")
            if not is_contained(user_dir, destination):
                raise MalformedRequestError("Invalid filename")

        return destination

    async def write_file(
        self,
        username: str,
        path_field: str | None,
        upload: UploadFile,
    ) -> Path:
        """Store one uploaded file for ``username``.

        Raises:
            MalformedRequestError: If the filename or path is rejected
            StorageError: If the file cannot be created or written
        """
        destination = self.destination(username, path_field, upload.filename)
        written = await run_in_threadpool(self._store, destination, upload.file)

        self._log.info(
            "upload.stored",
            username=username,
            path=str(destination),
            size=written,
        )
        return destination

    def _store(self, destination: Path, source: BinaryIO) -> int:
        directory = destination.parent
        try:
            directory.mkdir(mode=self._config.dir_mode, parents=True, exist_ok=True)
        except OSError as e:
            # Opening the file below reports the actual failure.
            self._log.warning("upload.mkdir_failed", path=str(directory), error=str(e))

        try:
            output = open(destination, "wb")
        except OSError as e:
            raise StorageError(self._error_text(e)) from e

        written = 0
        try:
            # Closing flushes buffered bytes, so close errors are write errors too.
            with output:
                while True:
                    chunk = source.read(self._config.chunk_size)
                    if not chunk:
                        break
                    output.write(chunk)
                    written += len(chunk)
        except OSError as e:
            self._log.warning(
                "upload.partial_write",
                path=str(destination),
                written=written,
                error=str(e),
            )
            raise StorageError(self._error_text(e)) from e
        return written

    def _error_text(self, error: OSError) -> str:
        if self._config.expose_errors:
            return str(error)
        return StorageError.message
