"""
Bearer-token authentication backed by Google sign-in ID tokens.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from google.auth import exceptions as google_auth_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Base class for credential failures; always surfaces as HTTP 401."""

    detail = "Unauthorized"


class MissingCredentialsError(AuthError):
    detail = "No token"


class InvalidCredentialsError(AuthError):
    detail = "Invalid token"


def extract_bearer_token(authorization: str | None) -> str:
    """
    Pull the token out of an ``Authorization: Bearer <token>`` header value.

    Raises:
        MissingCredentialsError: If the header is absent or blank.
        InvalidCredentialsError: If the scheme is not Bearer or no token follows it.
    """
    if not authorization or not authorization.strip():
        raise MissingCredentialsError()
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise InvalidCredentialsError()
    return token


class TokenVerifier(Protocol):
    """Verifies a bearer token and returns the stable subject id."""

    def verify(self, token: str) -> str:
        ...


class GoogleTokenVerifier:
    """Verifies Google ID tokens for a single OAuth client id."""

    def __init__(self, client_id: str):
        if not client_id:
            raise ValueError("GOOGLE_CLIENT_ID is required for GoogleTokenVerifier")
        self.client_id = client_id
        self._request = google_requests.Request()

    def verify(self, token: str) -> str:
        try:
            claims = id_token.verify_oauth2_token(
                token, self._request, audience=self.client_id
            )
        except (ValueError, google_auth_exceptions.GoogleAuthError) as exc:
            logger.info("Rejected ID token: %s", exc)
            raise InvalidCredentialsError() from exc
        subject = (claims or {}).get("sub")
        if not subject:
            logger.info("Rejected ID token without subject claim")
            raise InvalidCredentialsError()
        return subject


@dataclass
class StaticTokenVerifier:
    """Test double mapping known tokens to subjects; everything else is rejected."""

    tokens: dict[str, str] = field(default_factory=dict)

    def verify(self, token: str) -> str:
        subject = self.tokens.get(token)
        if subject is None:
            raise InvalidCredentialsError()
        return subject
