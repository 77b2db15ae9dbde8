from functools import lru_cache
import os


class Settings:
    def __init__(self) -> None:
        self.api_prefix = os.getenv("API_PREFIX", "/api/v1")
        self.environment = os.getenv("ENVIRONMENT", "development")
        self.app_name = os.getenv("APP_NAME", "tiered-version-store-api")
        self.cors_origins = self._parse_cors_origins()

        self.catalog_db_path = os.getenv("CATALOG_DB_PATH", "data/catalog.db")
        self.storage_bucket = os.getenv("STORAGE_BUCKET", "tiered-version-store")
        self.aws_region = os.getenv("AWS_DEFAULT_REGION", "us-east-1")
        self.signed_url_ttl_seconds = self._int("SIGNED_URL_TTL_SECONDS", 3600)
        self.site_margin_percent = self._float("SITE_MARGIN_PERCENT", 30.0)

        self.retry_max_attempts = self._int("RETRY_MAX_ATTEMPTS", 3)
        self.retry_base_delay_seconds = self._float("RETRY_BASE_DELAY_SECONDS", 1.0)
        self.retry_max_delay_seconds = self._float("RETRY_MAX_DELAY_SECONDS", 8.0)
        self.retry_backoff_multiplier = self._float("RETRY_BACKOFF_MULTIPLIER", 2.0)

        self.optimize_days_threshold = self._int("OPTIMIZE_DAYS_THRESHOLD", 30)
        self.optimize_target_class = os.getenv("OPTIMIZE_TARGET_CLASS", "STANDARD_IA")
        self.retention_default_tier = os.getenv("RETENTION_DEFAULT_TIER", "FREE").upper()
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    def _parse_cors_origins(self) -> list[str]:
        raw = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
        origins = [item.strip() for item in raw.split(",") if item.strip()]
        return origins or ["http://localhost:3000", "http://127.0.0.1:3000"]

    def _int(self, name: str, default: int) -> int:
        try:
            return int(os.getenv(name, str(default)))
        except ValueError:
            return default

    def _float(self, name: str, default: float) -> float:
        try:
            return float(os.getenv(name, str(default)))
        except ValueError:
            return default


@lru_cache
def get_settings() -> Settings:
    return Settings()
