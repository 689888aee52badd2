"""OAuth2 authenticator for the Google People API.

Credentials are persisted to a token file. The first run goes through the
installed-app consent flow in a browser; later runs reuse the stored token
and refresh it when it has expired.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

logger = logging.getLogger(__name__)

CONTACTS_SCOPES = ["https://www.googleapis.com/auth/contacts.readonly"]


class AuthError(RuntimeError):
    """Raised when no usable access token can be obtained."""


@dataclass(slots=True)
class ApplicationSecret:
    """OAuth client credentials of the installed application."""

    auth_uri: str
    token_uri: str
    redirect_uris: List[str]
    client_id: str
    client_secret: str = field(repr=False)

    def to_client_config(self) -> Dict[str, Any]:
        """Return the client config mapping understood by google-auth-oauthlib."""
        return {
            "installed": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "auth_uri": self.auth_uri,
                "token_uri": self.token_uri,
                "redirect_uris": list(self.redirect_uris),
            }
        }


class TokenProvider:
    """Hands out bearer tokens, refreshing and persisting as needed."""

    def __init__(self, credentials: Credentials, token_path: Optional[Path] = None) -> None:
        self.credentials = credentials
        self.token_path = token_path

    def access_token(self) -> str:
        creds = self.credentials
        if not creds.valid:
            if not creds.refresh_token:
                raise AuthError("Stored credentials expired and carry no refresh token.")
            _refresh(creds)
            self._persist()
        if not creds.token:
            raise AuthError("Credentials did not yield an access token.")
        return str(creds.token)

    def _persist(self) -> None:
        if self.token_path is not None:
            _save_credentials(self.credentials, self.token_path)


def build_authenticator(
    secret: ApplicationSecret,
    token_path: Path,
    *,
    scopes: Sequence[str] = CONTACTS_SCOPES,
    interactive: bool = True,
) -> TokenProvider:
    """Return a TokenProvider backed by the token file at ``token_path``.

    Args:
        secret: OAuth application credentials.
        token_path: Where the authorized-user token is cached.
        scopes: OAuth scopes to request.
        interactive: Run the browser consent flow if no usable token exists.

    Raises:
        AuthError: if no token is stored and ``interactive`` is False, or the
            consent flow / refresh fails.
    """

    creds = _load_credentials(token_path, scopes)

    if creds is not None and not creds.valid and creds.refresh_token:
        try:
            _refresh(creds)
        except AuthError:
            logger.warning("Could not refresh token from %s, re-authorizing", token_path)
            creds = None
        else:
            _save_credentials(creds, token_path)

    if creds is None or not creds.valid:
        if not interactive:
            raise AuthError(
                f"No valid token at {token_path}; run the CLI once to authorize."
            )
        creds = _run_consent_flow(secret, scopes)
        _save_credentials(creds, token_path)

    return TokenProvider(creds, token_path)


def _load_credentials(token_path: Path, scopes: Sequence[str]) -> Optional[Credentials]:
    if not token_path.exists():
        return None
    try:
        return Credentials.from_authorized_user_file(str(token_path), list(scopes))
    except (ValueError, OSError) as exc:
        logger.warning("Ignoring unreadable token file %s: %s", token_path, exc)
        return None


def _refresh(creds: Credentials) -> None:
    logger.info("Refreshing expired access token")
    try:
        creds.refresh(Request())
    except GoogleAuthError as exc:
        raise AuthError(f"Token refresh failed: {exc}") from exc


def _run_consent_flow(secret: ApplicationSecret, scopes: Sequence[str]) -> Credentials:
    flow = InstalledAppFlow.from_client_config(secret.to_client_config(), list(scopes))
    try:
        return flow.run_local_server(port=0, access_type="offline", prompt="consent")
    except Exception as exc:  # pragma: no cover - interactive browser path
        raise AuthError(f"OAuth consent flow failed: {exc}") from exc


def _save_credentials(creds: Credentials, token_path: Path) -> None:
    token_path.parent.mkdir(parents=True, exist_ok=True)
    token_path.write_text(creds.to_json(), encoding="utf-8")
    logger.info("Saved OAuth token to %s", token_path)
