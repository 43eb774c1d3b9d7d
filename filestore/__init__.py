"""filestore - token-authenticated upload receiver and static file server."""

__version__ = "0.1.0"
