"""Configuration helpers for the enmass CLI."""
from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from .auth import ApplicationSecret


DEFAULT_TOKEN_PATH = "token.json"

# Settings field -> environment variable. These five are required.
REQUIRED_VARS = {
    "auth_uri": "AUTH_URI",
    "token_uri": "TOKEN_URI",
    "redirect_uris": "REDIRECT_URIS",
    "client_id": "CLIENT_ID",
    "client_secret": "CLIENT_SECRET",
}


class ConfigError(RuntimeError):
    """Raised when required configuration is missing."""


@dataclass(slots=True)
class Settings:
    """Runtime configuration for the CLI and API."""

    auth_uri: str
    token_uri: str
    redirect_uris: List[str]
    client_id: str
    client_secret: str = field(repr=False)
    token_path: Path = Path(DEFAULT_TOKEN_PATH)
    environment: str = "local"
    log_level: str = "WARNING"
    backtrace: bool = False

    def secret(self) -> ApplicationSecret:
        """Return the OAuth application secret for the authenticator."""
        return ApplicationSecret(
            auth_uri=self.auth_uri,
            token_uri=self.token_uri,
            redirect_uris=list(self.redirect_uris),
            client_id=self.client_id,
            client_secret=self.client_secret,
        )


def split_redirect_uris(raw: str) -> List[str]:
    return [uri.strip() for uri in raw.split(",") if uri.strip()]


def load_settings(
    *,
    overrides: Optional[Mapping[str, Optional[str]]] = None,
    dotenv: bool = True,
) -> Settings:
    """Load settings from environment variables.

    Args:
        overrides: Values taken from command-line flags, keyed by Settings
            field name. ``None`` values fall through to the environment.
        dotenv: Load the nearest ``.env`` above the working directory first
            (existing variables win).

    Returns:
        Settings with the resolved OAuth application credentials.

    Raises:
        ConfigError: if any required credential is unavailable.
    """

    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    overrides = overrides or {}

    def _value(name: str, env_var: str) -> Optional[str]:
        value = overrides.get(name)
        if value is None:
            value = os.getenv(env_var)
        return value.strip() if value else None

    values = {name: _value(name, env_var) for name, env_var in REQUIRED_VARS.items()}
    redirect_uris = split_redirect_uris(values["redirect_uris"] or "")

    missing = [
        env_var
        for name, env_var in REQUIRED_VARS.items()
        if not (redirect_uris if name == "redirect_uris" else values[name])
    ]
    if missing:
        raise ConfigError(
            f"Missing OAuth configuration: {', '.join(missing)}. "
            "Export them, add them to .env, or pass the matching flags."
        )

    token_path = overrides.get("token_path") or os.getenv(
        "ENMASS_TOKEN_PATH", DEFAULT_TOKEN_PATH
    )

    return Settings(
        auth_uri=values["auth_uri"],
        token_uri=values["token_uri"],
        redirect_uris=redirect_uris,
        client_id=values["client_id"],
        client_secret=values["client_secret"],
        token_path=Path(token_path),
        environment=os.getenv("ENMASS_ENV", "local"),
        log_level=os.getenv("ENMASS_LOG_LEVEL", "WARNING").upper(),
        backtrace=os.getenv("ENMASS_BACKTRACE", "0") == "1",
    )
