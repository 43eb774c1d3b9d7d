"""Token authentication."""

from filestore.auth.authenticator import BEARER_PREFIX, Authenticator
from filestore.auth.credentials import CredentialStore

__all__ = ["BEARER_PREFIX", "Authenticator", "CredentialStore"]
