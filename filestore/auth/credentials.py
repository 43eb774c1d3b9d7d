"""In-memory credential store."""

from __future__ import annotations

from collections.abc import Iterable

from filestore.config import UserConfig


class CredentialStore:
    """Read-only list of (username, token) pairs loaded at startup.

    Lookups are a linear scan: the user list is small and only changes on
    restart. Safe for unsynchronized concurrent reads.
    """

    def __init__(self, users: Iterable[UserConfig]) -> None:
        self._users: tuple[UserConfig, ...] = tuple(users)

    def __len__(self) -> int:
        return len(self._users)

    def lookup(self, token: str) -> str | None:
        """Return the username owning ``token``, or None.

        Duplicate tokens resolve to the first configured user.
        """
        for user in self._users:
            if user.token == token:
                return user.username
        return None
