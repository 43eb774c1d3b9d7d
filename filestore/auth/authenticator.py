"""Authorization header resolution."""

from __future__ import annotations

import structlog

from filestore.auth.credentials import CredentialStore

logger = structlog.get_logger()

BEARER_PREFIX = "Bearer "


class Authenticator:
    """Resolves an Authorization header value to a username.

    Two header shapes are accepted:
    - ``Bearer <token>``
    - ``<token>`` (raw token, for older clients)
    """

    def __init__(self, credentials: CredentialStore) -> None:
        self._credentials = credentials
        self._log = logger.bind(component="authenticator")

    def authenticate(self, header_value: str | None) -> str | None:
        """Return the username for the header, or None if it is rejected."""
        if not header_value:
            self._log.debug("auth.rejected", reason="missing_header")
            return None

        if header_value.startswith(BEARER_PREFIX):
            token = header_value[len(BEARER_PREFIX):]
            scheme = "bearer"
        else:
            token = header_value
            scheme = "raw"

        username = self._credentials.lookup(token)
        if username is None:
            self._log.info("auth.rejected", reason="unknown_token", scheme=scheme)
            return None

        self._log.debug("auth.accepted", username=username, scheme=scheme)
        return username
