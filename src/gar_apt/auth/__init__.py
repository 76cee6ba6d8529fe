"""Credential sources for Artifact Registry requests.

Three sources are supported, chosen from the method configuration:

- JsonKeyFile: a credentials JSON file named by Acquire::gar::Service-Account-JSON
- ComputeIdentity: a service account attached to the GCE instance, named by
  Acquire::gar::Service-Account-Email
- AmbientCredentials: Application Default Credentials discovery

Each resolves to a google-auth credentials object, which is wrapped in an
AuthorizedSession (a requests.Session that attaches and refreshes tokens).
"""

import logging
from dataclasses import dataclass
from typing import Union

import google.auth
import google.auth.compute_engine
import google.auth.exceptions
from google.auth.transport.requests import AuthorizedSession

from ..config import MethodConfig
from ..constants import CLOUD_PLATFORM_SCOPE
from ..errors import CredentialError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JsonKeyFile:
    """Credentials loaded from a JSON key file."""
    path: str

    def describe(self) -> str:
        return "Using provided JSON credentials file for Google Artifact Registry"

    def load(self):
        credentials, _ = google.auth.load_credentials_from_file(
            self.path, scopes=[CLOUD_PLATFORM_SCOPE]
        )
        return credentials


@dataclass(frozen=True)
class ComputeIdentity:
    """Tokens from the metadata server for a given service account."""
    email: str

    def describe(self) -> str:
        return "Using provided service account email for Google Artifact Registry"

    def load(self):
        return google.auth.compute_engine.Credentials(service_account_email=self.email)


@dataclass(frozen=True)
class AmbientCredentials:
    """Application Default Credentials."""

    def describe(self) -> str:
        return "Using application default credentials for Google Artifact Registry"

    def load(self):
        credentials, _ = google.auth.default(scopes=[CLOUD_PLATFORM_SCOPE])
        return credentials


CredentialSource = Union[JsonKeyFile, ComputeIdentity, AmbientCredentials]


def select_credential_source(config: MethodConfig) -> CredentialSource:
    """Pick a credential source: JSON key file, then email, then ambient."""
    if config.service_account_json:
        return JsonKeyFile(config.service_account_json)
    if config.service_account_email:
        return ComputeIdentity(config.service_account_email)
    return AmbientCredentials()


def authorized_session(source: CredentialSource) -> AuthorizedSession:
    """Create an HTTP session authenticated by `source`.

    Args:
        source: Credential source to resolve

    Returns:
        AuthorizedSession that attaches bearer tokens to each request

    Raises:
        CredentialError: If the source cannot produce credentials
    """
    logger.debug("Resolving credentials from %s", source)
    try:
        credentials = source.load()
    except (google.auth.exceptions.GoogleAuthError, OSError, ValueError) as e:
        raise CredentialError(f"Failed to obtain creds: {e}") from e
    if credentials is None:
        raise CredentialError("Failed to obtain creds")
    return AuthorizedSession(credentials)


__all__ = [
    "JsonKeyFile",
    "ComputeIdentity",
    "AmbientCredentials",
    "CredentialSource",
    "select_credential_source",
    "authorized_session",
]
