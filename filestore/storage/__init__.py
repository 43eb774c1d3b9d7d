"""On-disk storage of uploaded files."""

from filestore.storage.writer import FileWriter

__all__ = ["FileWriter"]
