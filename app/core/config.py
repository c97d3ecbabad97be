from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000"]

    # Service account key as a single JSON value (client_email, private_key, ...)
    GOOGLE_SERVICE_ACCOUNT_KEY: Optional[str] = None
    GOOGLE_CLOUD_PROJECT_ID: Optional[str] = None
    GOOGLE_MAPS_API_KEY: Optional[str] = None

    GOOGLE_TOKEN_URI: str = "https://oauth2.googleapis.com/token"
    GOOGLE_AUTH_SCOPE: str = "https://www.googleapis.com/auth/cloud-platform"
    ROUTE_OPTIMIZATION_BASE_URL: str = "https://routeoptimization.googleapis.com/v1"

    # Warehouse (Valladolid by default)
    WAREHOUSE_LAT: float = 41.6523
    WAREHOUSE_LNG: float = -4.7245

    DURATION_PER_DELIVERY_SECONDS: int = 300
    COST_PER_KILOMETER: float = 1.0
    COST_PER_HOUR: float = 0.5
    TIME_WINDOW_HOURS: float = 8
    AVERAGE_SPEED_KMH: float = 30.0

    HTTP_TIMEOUT_SECONDS: float = 30.0
    GEOCODING_MAX_WORKERS: int = 10

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
