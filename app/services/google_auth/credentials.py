"""
Service-account credential loading.

The key comes from a single JSON value (the content of the key file Google
hands out). No network access happens here.
"""

import json
from typing import Optional
from pydantic import BaseModel, ConfigDict
from app.core.config import Settings
from app.core.exceptions import ConfigurationError
from app.core.logging_config import logger

PEM_HEADER = "-----BEGIN"
PEM_FOOTER = "PRIVATE KEY-----"


class ServiceAccountCredential(BaseModel):
    """Identity and signing key of a Google service account."""
    model_config = ConfigDict(frozen=True)

    client_email: str
    private_key: str


class CredentialStore:
    """Reads and validates the service-account credential from settings."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def load(self) -> ServiceAccountCredential:
        """
        Load the service-account credential.

        Returns:
            ServiceAccountCredential with a PEM key using real newlines

        Raises:
            ConfigurationError: If the key is missing, not JSON, or lacks
                client_email / private_key
        """
        raw = self.settings.GOOGLE_SERVICE_ACCOUNT_KEY
        if not raw or not raw.strip():
            raise ConfigurationError(
                "GOOGLE_SERVICE_ACCOUNT_KEY is not configured"
            )

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"GOOGLE_SERVICE_ACCOUNT_KEY is not valid JSON: {e.msg}"
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError("GOOGLE_SERVICE_ACCOUNT_KEY must be a JSON object")

        client_email = data.get("client_email")
        private_key = data.get("private_key")

        if not isinstance(client_email, str) or "@" not in client_email:
            raise ConfigurationError("Service account key has no valid client_email")

        if not isinstance(private_key, str) or not private_key.strip():
            raise ConfigurationError("Service account key has no private_key")

        private_key = normalize_private_key(private_key)
        if PEM_HEADER not in private_key or PEM_FOOTER not in private_key:
            raise ConfigurationError("Service account private_key is not a PEM private key")

        logger.info(f"Loaded service account credential for {client_email}")
        return ServiceAccountCredential(client_email=client_email, private_key=private_key)

    def get_project_id(self) -> str:
        """
        Get the Google Cloud project used in the optimization URL.

        Raises:
            ConfigurationError: If GOOGLE_CLOUD_PROJECT_ID is not set
        """
        project_id: Optional[str] = self.settings.GOOGLE_CLOUD_PROJECT_ID
        if not project_id or not str(project_id).strip():
            raise ConfigurationError("GOOGLE_CLOUD_PROJECT_ID is not configured")
        return str(project_id).strip()


def normalize_private_key(private_key: str) -> str:
    """Turn literal ``\\n`` sequences (common in env files) into newlines."""
    return private_key.replace("\\n", "\n").strip() + "\n"
