import httpx
from typing import Optional
from app.core.config import Settings
from app.services.google_auth.credentials import CredentialStore
from app.services.google_auth.jwt_signer import JWTSigner
from app.services.google_auth.token_exchanger import TokenExchanger


class GoogleAuthenticator:
    """
    Derives a fresh access token from the configured service account.

    Tokens are not cached: every call signs a new assertion and exchanges it.
    """

    def __init__(self, settings: Settings, http_client: Optional[httpx.Client] = None):
        self.credential_store = CredentialStore(settings)
        self.scope = settings.GOOGLE_AUTH_SCOPE
        self.signer = JWTSigner(token_uri=settings.GOOGLE_TOKEN_URI)
        self.exchanger = TokenExchanger(
            token_uri=settings.GOOGLE_TOKEN_URI,
            http_client=http_client,
            timeout=settings.HTTP_TIMEOUT_SECONDS
        )

    def get_access_token(self) -> str:
        credential = self.credential_store.load()
        assertion = self.signer.sign(credential, self.scope)
        return self.exchanger.exchange(assertion)
