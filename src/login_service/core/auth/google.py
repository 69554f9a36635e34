"""Google OAuth 2.0 client.

Drives the authorization-code flow against Google:
- builds the consent URL (scopes: profile, email)
- exchanges the callback code for an access token
- reads the user's email from the userinfo endpoint

The token exchange is trusted; no ID token validation happens here.
"""

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx

from login_service.domain.errors import ProviderError
from login_service.domain.models import FederatedIdentity

logger = logging.getLogger(__name__)

GOOGLE_AUTHORIZATION_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"


class GoogleOAuthClient:
    """OAuth 2.0 client for Google sign-in.

    Example Configuration:
        GOOGLE_CLIENT_ID=xxx.apps.googleusercontent.com
        GOOGLE_CLIENT_SECRET=GOCSPX-xxx
        GOOGLE_CALLBACK_URL=http://localhost:3000/auth/google/secrets
    """

    provider_name = "google"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        scopes: Optional[list[str]] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Google client.

        Args:
            client_id: OAuth 2.0 client ID
            client_secret: OAuth 2.0 client secret
            redirect_uri: Registered callback URL
            scopes: Scopes to request (default: profile email)
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.scopes = scopes or ["profile", "email"]
        self.timeout = timeout
        self._transport = transport

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    def get_login_url(self, state: str) -> str:
        """Generate Google authorization URL.

        Args:
            state: CSRF protection state

        Returns:
            URL to redirect the user to
        """
        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "scope": " ".join(self.scopes),
            "redirect_uri": self.redirect_uri,
            "state": state,
        }
        return f"{GOOGLE_AUTHORIZATION_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> FederatedIdentity:
        """Exchange authorization code for the user's identity.

        Args:
            code: Authorization code from the callback

        Returns:
            FederatedIdentity carrying the Google account email

        Raises:
            ProviderError: If the token exchange or userinfo call fails
        """
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }

        try:
            async with self._http() as client:
                response = await client.post(
                    GOOGLE_TOKEN_URL,
                    data=data,
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
                if response.status_code != 200:
                    logger.error(f"Google token exchange failed: HTTP {response.status_code}")
                    raise ProviderError(f"Token exchange failed: {response.status_code}")

                token_payload = response.json()
                if not isinstance(token_payload, dict):
                    raise ProviderError("Token response was not a JSON object")
                access_token = token_payload.get("access_token")
                if not access_token or not isinstance(access_token, str):
                    raise ProviderError("Token response did not include an access token")

                response = await client.get(
                    GOOGLE_USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                if response.status_code != 200:
                    logger.error(f"Google userinfo request failed: HTTP {response.status_code}")
                    raise ProviderError(f"Userinfo request failed: {response.status_code}")

                profile = response.json()
                if not isinstance(profile, dict):
                    raise ProviderError("Userinfo response was not a JSON object")

        except httpx.HTTPError as e:
            logger.error(f"Google request failed: {type(e).__name__}: {e}")
            raise ProviderError(f"Google request failed: {type(e).__name__}") from e
        except ValueError as e:
            logger.error(f"Google returned a malformed response: {e}")
            raise ProviderError("Malformed provider response") from e

        email = profile.get("email")
        if not email or not isinstance(email, str):
            raise ProviderError("Google profile did not include an email")
        if profile.get("email_verified") is False:
            raise ProviderError("Google account email is not verified")

        logger.info(f"Google sign-in completed for {email}")
        return FederatedIdentity(
            provider=self.provider_name,
            email=email,
            subject=profile.get("sub"),
        )
