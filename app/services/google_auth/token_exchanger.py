"""
OAuth2 token endpoint client (JWT bearer grant, RFC 7523).
"""

import httpx
from typing import Optional
from app.core.exceptions import TokenExchangeError
from app.core.logging_config import logger
from app.services.google_auth.jwt_signer import DEFAULT_TOKEN_URI

JWT_BEARER_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"


class TokenExchanger:
    """Exchanges a signed assertion for a short-lived access token."""

    def __init__(
        self,
        token_uri: str = DEFAULT_TOKEN_URI,
        http_client: Optional[httpx.Client] = None,
        timeout: float = 30.0
    ):
        """
        Initialize the token exchanger.

        Args:
            token_uri: OAuth2 token endpoint
            http_client: Client to reuse (a short-lived one is opened per call otherwise)
            timeout: Request timeout in seconds
        """
        self.token_uri = token_uri
        self.http_client = http_client
        self.timeout = timeout

    def exchange(self, assertion: str) -> str:
        """
        Exchange a signed assertion for a bearer access token.

        Args:
            assertion: Signed JWT from JWTSigner

        Returns:
            Access token string

        Raises:
            TokenExchangeError: On transport failure, non-2xx status, or a
                response without ``access_token``. Never retried here.
        """
        form = {
            "grant_type": JWT_BEARER_GRANT_TYPE,
            "assertion": assertion,
        }

        logger.info("Requesting OAuth2 access token")

        try:
            if self.http_client is not None:
                response = self.http_client.post(self.token_uri, data=form, timeout=self.timeout)
            else:
                with httpx.Client() as client:
                    response = client.post(self.token_uri, data=form, timeout=self.timeout)
        except httpx.RequestError as e:
            logger.error(f"Token endpoint unreachable: {str(e)}")
            raise TokenExchangeError(f"Token endpoint unreachable: {str(e)}") from e

        if not response.is_success:
            logger.error(f"Token exchange failed {response.status_code}: {response.text}")
            raise TokenExchangeError(
                f"Token exchange failed with HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text
            )

        try:
            data = response.json()
        except ValueError as e:
            raise TokenExchangeError(
                "Token endpoint returned a non-JSON body",
                status_code=response.status_code,
                body=response.text
            ) from e

        access_token = data.get("access_token") if isinstance(data, dict) else None
        if not access_token:
            raise TokenExchangeError(
                "Token endpoint response has no access_token",
                status_code=response.status_code,
                body=response.text
            )

        logger.info("OAuth2 access token obtained")
        return access_token
