"""
JWT assertion signing for the service-account OAuth2 flow.

The token is assembled by hand (RFC 7515 compact serialization) and signed
with RSASSA-PKCS1-v1_5 + SHA-256. Only the RSA primitive comes from the
``cryptography`` package.
"""

import base64
import json
import time
from typing import Any, Dict, Optional
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from app.core.exceptions import CredentialError
from app.services.google_auth.credentials import ServiceAccountCredential

ASSERTION_LIFETIME_SECONDS = 3600
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"


def base64url_encode(data: bytes) -> str:
    """Base64url (RFC 4648 section 5) without ``=`` padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _encode_segment(value: Dict[str, Any]) -> str:
    return base64url_encode(json.dumps(value, separators=(",", ":")).encode("utf-8"))


class JWTSigner:
    """Builds signed assertions for the token endpoint."""

    HEADER = {"alg": "RS256", "typ": "JWT"}

    def __init__(self, token_uri: str = DEFAULT_TOKEN_URI):
        self.token_uri = token_uri

    def build_claims(self, credential: ServiceAccountCredential, scope: str, issued_at: int) -> Dict[str, Any]:
        return {
            "iss": credential.client_email,
            "scope": scope,
            "aud": self.token_uri,
            "iat": issued_at,
            "exp": issued_at + ASSERTION_LIFETIME_SECONDS,
        }

    def sign(
        self,
        credential: ServiceAccountCredential,
        scope: str,
        issued_at: Optional[int] = None
    ) -> str:
        """
        Create a signed assertion.

        Args:
            credential: Service-account credential
            scope: Space separated OAuth2 scopes
            issued_at: Unix time for ``iat`` (defaults to now)

        Returns:
            ``<header>.<payload>.<signature>`` string

        Raises:
            CredentialError: If the private key cannot be loaded or is not RSA
        """
        if issued_at is None:
            issued_at = int(time.time())

        signing_input = ".".join([
            _encode_segment(self.HEADER),
            _encode_segment(self.build_claims(credential, scope, issued_at)),
        ])
        signature = self._sign_bytes(credential.private_key, signing_input.encode("ascii"))

        return f"{signing_input}.{base64url_encode(signature)}"

    def _sign_bytes(self, private_key_pem: str, data: bytes) -> bytes:
        try:
            key = serialization.load_pem_private_key(private_key_pem.encode("utf-8"), password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise CredentialError(f"Could not load service account private key: {e}") from e

        if not isinstance(key, rsa.RSAPrivateKey):
            raise CredentialError(
                f"RS256 requires an RSA private key, got {type(key).__name__}"
            )

        return key.sign(data, padding.PKCS1v15(), hashes.SHA256())
