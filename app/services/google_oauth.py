"""Google sign-in (OAuth 2.0 authorization code flow).

Each login carries its own GoogleLoginFlow: the random `state` is kept in a
signed cookie on the browser between the redirect and the callback, so no
handshake data lives in the process.
"""
import logging
import secrets
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from urllib.parse import urlencode

import httpx

from app.core.config import Settings

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
SCOPES = "openid email profile"


class GoogleAuthError(Exception):
    """The handshake failed: bad state, rejected code, or an unverified e-mail."""


@dataclass
class GoogleProfile:
    google_id: str
    email: str
    email_verified: bool


@dataclass
class GoogleLoginFlow:
    settings: Settings
    state: str = field(default_factory=lambda: secrets.token_urlsafe(24))

    def authorization_url(self) -> str:
        params = {
            "client_id": self.settings.google_client_id,
            "redirect_uri": self.settings.google_redirect_uri,
            "response_type": "code",
            "scope": SCOPES,
            "state": self.state,
            "access_type": "online",
            "prompt": "select_account",
        }
        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    def check_state(self, returned_state: str | None) -> None:
        if not returned_state or not secrets.compare_digest(self.state, returned_state):
            raise GoogleAuthError("OAuth state mismatch")

    async def fetch_profile(self, client: httpx.AsyncClient, code: str) -> GoogleProfile:
        """Exchange the authorization code and return the verified Google profile."""
        try:
            token_resp = await client.post(
                TOKEN_URL,
                data={
                    "code": code,
                    "client_id": self.settings.google_client_id,
                    "client_secret": self.settings.google_client_secret,
                    "redirect_uri": self.settings.google_redirect_uri,
                    "grant_type": "authorization_code",
                },
            )
            token_resp.raise_for_status()
            access_token = token_resp.json().get("access_token")
            if not access_token:
                raise GoogleAuthError("No access token in Google response")

            info_resp = await client.get(USERINFO_URL, headers={"Authorization": f"Bearer {access_token}"})
            info_resp.raise_for_status()
            info = info_resp.json()
        except httpx.HTTPError as exc:
            raise GoogleAuthError(f"Google request failed: {exc}") from exc

        profile = GoogleProfile(
            google_id=str(info.get("sub", "")),
            email=info.get("email") or "",
            email_verified=bool(info.get("email_verified")),
        )
        if not profile.email or not profile.email_verified:
            raise GoogleAuthError("Google account e-mail is missing or not verified")
        return profile


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=15) as client:
        yield client
