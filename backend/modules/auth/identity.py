"""
External identity providers.

- GoogleOAuthClient: user-info lookup for native access tokens, plus the
  authorization-code leg of the external-browser mobile sign-in.
- AppleIdentityVerifier: decodes Sign in with Apple identity tokens. When
  an Apple client ID is configured the token signature, audience and
  issuer are checked against Apple's published keys; otherwise the claims
  are decoded as-is.

Every outbound call is bounded by a timeout. A timeout, transport error or
non-success response surfaces as UpstreamAuthError.
"""

import asyncio
import logging
from typing import Any, Optional
from urllib.parse import urlencode

import httpx
import jwt

from .exceptions import MalformedTokenError, UpstreamAuthError
from .models import ExternalIdentity

logger = logging.getLogger(__name__)


class GoogleOAuthClient:
    """Google OAuth2 endpoints used by the token exchanger."""

    PROVIDER = "google"
    AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
    SCOPES = "openid email profile"

    def __init__(
        self,
        client_id: str = "",
        client_secret: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            client_id: OAuth client ID (needed only for the redirect flow)
            client_secret: OAuth client secret (needed only for the redirect flow)
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self._client_id = client_id
        self._client_secret = client_secret
        self._timeout = timeout
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self._client_id and self._client_secret)

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def fetch_user_info(self, access_token: str) -> ExternalIdentity:
        """
        Resolve an access token to the Google account behind it.

        Raises:
            UpstreamAuthError: If Google is unreachable, times out, rejects
                the token, or returns no email
        """
        data = await self._request(
            "GET",
            self.USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )

        if not data.get("email"):
            raise UpstreamAuthError(self.PROVIDER, "No email in Google response")

        return ExternalIdentity(
            provider=self.PROVIDER,
            subject=data.get("id"),
            email=data["email"],
            name=data.get("name"),
            picture=data.get("picture"),
        )

    def authorization_url(self, redirect_uri: str, state: str) -> str:
        """Build the consent-screen URL for the redirect flow."""
        params = {
            "client_id": self._client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": self.SCOPES,
            "state": state,
            "prompt": "select_account",
        }
        return f"{self.AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str, redirect_uri: str) -> str:
        """
        Exchange an authorization code for an access token.

        Raises:
            UpstreamAuthError: On any failure of the token endpoint
        """
        data = await self._request(
            "POST",
            self.TOKEN_URL,
            data={
                "code": code,
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "redirect_uri": redirect_uri,
                "grant_type": "authorization_code",
            },
        )
        access_token = data.get("access_token")
        if not access_token:
            raise UpstreamAuthError(self.PROVIDER, "No access token in Google response")
        return access_token

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            async with self._http() as client:
                response = await client.request(method, url, **kwargs)
        except httpx.TimeoutException:
            logger.warning(f"Google request timed out: {url}")
            raise UpstreamAuthError(self.PROVIDER, "Request timed out")
        except httpx.HTTPError as e:
            logger.warning(f"Google request failed: {url}: {e}")
            raise UpstreamAuthError(self.PROVIDER, "Provider unreachable")

        if response.status_code != 200:
            logger.info(f"Google rejected request to {url} with {response.status_code}")
            raise UpstreamAuthError(self.PROVIDER, "Failed to get user info from Google")

        try:
            return response.json()
        except ValueError:
            raise UpstreamAuthError(self.PROVIDER, "Malformed provider response")


class AppleIdentityVerifier:
    """Decodes (and, when configured, verifies) Apple identity tokens."""

    PROVIDER = "apple"
    ISSUER = "https://appleid.apple.com"
    JWKS_URL = "https://appleid.apple.com/auth/keys"

    def __init__(
        self,
        client_id: str = "",
        timeout: float = 10.0,
        jwks_client: Optional[jwt.PyJWKClient] = None,
    ):
        self._client_id = client_id
        self._jwks = jwks_client
        if client_id and jwks_client is None:
            self._jwks = jwt.PyJWKClient(self.JWKS_URL, timeout=int(timeout))

    @property
    def verifies_signature(self) -> bool:
        return bool(self._client_id)

    async def decode(self, identity_token: str) -> ExternalIdentity:
        """
        Decode an identity token into an external identity.

        Raises:
            MalformedTokenError: If the token can't be decoded, fails
                verification, or carries no subject
            UpstreamAuthError: If Apple's signing keys can't be fetched
        """
        if self.verifies_signature:
            claims = await self._verified_claims(identity_token)
        else:
            try:
                claims = jwt.decode(identity_token, options={"verify_signature": False})
            except jwt.InvalidTokenError:
                raise MalformedTokenError()

        if not claims.get("sub"):
            raise MalformedTokenError()

        return ExternalIdentity(
            provider=self.PROVIDER,
            subject=claims["sub"],
            email=claims.get("email"),
        )

    async def _verified_claims(self, identity_token: str) -> dict[str, Any]:
        try:
            signing_key = await asyncio.to_thread(
                self._jwks.get_signing_key_from_jwt, identity_token
            )
        except jwt.PyJWKClientConnectionError as e:
            logger.warning(f"Failed to fetch Apple signing keys: {e}")
            raise UpstreamAuthError(self.PROVIDER, "Signing keys unavailable")
        except (jwt.PyJWKClientError, jwt.InvalidTokenError):
            raise MalformedTokenError()

        try:
            return jwt.decode(
                identity_token,
                signing_key.key,
                algorithms=["RS256"],
                audience=self._client_id,
                issuer=self.ISSUER,
            )
        except jwt.InvalidTokenError as e:
            logger.info(f"Apple identity token rejected: {e}")
            raise MalformedTokenError()
