"""
Service-account OAuth2 authentication for Google APIs.

- CredentialStore loads the service-account key from settings
- JWTSigner builds and RS256-signs the assertion
- TokenExchanger trades the assertion for a bearer access token
- GoogleAuthenticator chains the three for each request
"""

from .credentials import CredentialStore, ServiceAccountCredential
from .jwt_signer import JWTSigner
from .token_exchanger import TokenExchanger
from .authenticator import GoogleAuthenticator

__all__ = [
    "CredentialStore",
    "ServiceAccountCredential",
    "JWTSigner",
    "TokenExchanger",
    "GoogleAuthenticator",
]
