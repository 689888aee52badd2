"""Tests for the OAuth authenticator; google-auth objects are mocked."""
from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from google.auth.exceptions import RefreshError

from enmass.auth import (
    CONTACTS_SCOPES,
    ApplicationSecret,
    AuthError,
    TokenProvider,
    build_authenticator,
)


@pytest.fixture
def secret():
    return ApplicationSecret(
        auth_uri="https://accounts.google.com/o/oauth2/auth",
        token_uri="https://oauth2.googleapis.com/token",
        redirect_uris=["http://localhost"],
        client_id="client-123",
        client_secret="shh",
    )


def _creds(*, valid=True, refresh_token="refresh", token="access"):
    creds = MagicMock()
    creds.valid = valid
    creds.refresh_token = refresh_token
    creds.token = token
    creds.to_json.return_value = '{"token": "%s"}' % token
    return creds


def test_client_config_shape(secret):
    config = secret.to_client_config()

    assert config["installed"]["client_id"] == "client-123"
    assert config["installed"]["redirect_uris"] == ["http://localhost"]
    assert config["installed"]["token_uri"] == "https://oauth2.googleapis.com/token"


@patch("enmass.auth.InstalledAppFlow")
@patch("enmass.auth.Credentials")
def test_valid_stored_token_is_reused(mock_credentials, mock_flow, secret, tmp_path):
    token_path = tmp_path / "token.json"
    token_path.write_text("{}", encoding="utf-8")
    creds = _creds()
    mock_credentials.from_authorized_user_file.return_value = creds

    provider = build_authenticator(secret, token_path)

    assert provider.access_token() == "access"
    mock_credentials.from_authorized_user_file.assert_called_once_with(
        str(token_path), CONTACTS_SCOPES
    )
    mock_flow.from_client_config.assert_not_called()


@patch("enmass.auth.Request")
@patch("enmass.auth.Credentials")
def test_expired_token_is_refreshed_and_saved(mock_credentials, mock_request, secret, tmp_path):
    token_path = tmp_path / "token.json"
    token_path.write_text("{}", encoding="utf-8")
    creds = _creds(valid=False, token="fresh")

    def _refresh(_request):
        creds.valid = True

    creds.refresh.side_effect = _refresh
    mock_credentials.from_authorized_user_file.return_value = creds

    build_authenticator(secret, token_path)

    creds.refresh.assert_called_once()
    assert token_path.read_text(encoding="utf-8") == '{"token": "fresh"}'


@patch("enmass.auth.InstalledAppFlow")
def test_first_run_uses_consent_flow(mock_flow, secret, tmp_path):
    token_path = tmp_path / "nested" / "token.json"
    flow = mock_flow.from_client_config.return_value
    flow.run_local_server.return_value = _creds(token="new")

    provider = build_authenticator(secret, token_path)

    mock_flow.from_client_config.assert_called_once_with(
        secret.to_client_config(), CONTACTS_SCOPES
    )
    assert provider.access_token() == "new"
    assert token_path.exists()


def test_non_interactive_without_token_fails(secret, tmp_path):
    with pytest.raises(AuthError, match="authorize"):
        build_authenticator(secret, tmp_path / "missing.json", interactive=False)


@patch("enmass.auth.Credentials")
def test_unreadable_token_file_is_ignored(mock_credentials, secret, tmp_path):
    token_path = tmp_path / "token.json"
    token_path.write_text("not json", encoding="utf-8")
    mock_credentials.from_authorized_user_file.side_effect = ValueError("bad file")

    with pytest.raises(AuthError):
        build_authenticator(secret, token_path, interactive=False)


class TestTokenProvider:
    """Tests for TokenProvider.access_token()"""

    @patch("enmass.auth.Request")
    def test_refresh_failure_raises_auth_error(self, mock_request):
        creds = _creds(valid=False)
        creds.refresh.side_effect = RefreshError("revoked")

        with pytest.raises(AuthError, match="revoked"):
            TokenProvider(creds).access_token()

    def test_expired_without_refresh_token(self):
        with pytest.raises(AuthError, match="no refresh token"):
            TokenProvider(_creds(valid=False, refresh_token=None)).access_token()

    @patch("enmass.auth.Request")
    def test_refresh_persists_token(self, mock_request, tmp_path):
        token_path = tmp_path / "token.json"
        creds = _creds(valid=False, token="rotated")

        assert TokenProvider(creds, token_path).access_token() == "rotated"
        assert token_path.read_text(encoding="utf-8") == '{"token": "rotated"}'
