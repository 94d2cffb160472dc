import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


class Settings:
    """Centralised application configuration sourced from environment variables."""

    def __init__(self) -> None:
        load_dotenv()
        self.database_path = Path(os.getenv("DATABASE_PATH", "data/neighborswap.db")).resolve()
        self.jwt_secret = os.getenv("JWT_SECRET", "change-me")
        self.jwt_algorithm = os.getenv("JWT_ALGORITHM", "HS256")
        self.jwt_expiration_hours = self._get_int("JWT_EXPIRATION_HOURS", default=24)
        self.bcrypt_rounds = self._get_int("BCRYPT_ROUNDS", default=12)
        self.upload_dir = Path(os.getenv("UPLOAD_DIR", "uploads")).resolve()
        self.max_upload_bytes = self._get_int("MAX_UPLOAD_BYTES", default=5_000_000)
        self.max_images_per_listing = self._get_int("MAX_IMAGES_PER_LISTING", default=5)
        self.listing_result_limit = self._get_int("LISTING_RESULT_LIMIT", default=50)
        self.seed_enabled = self._get_bool("SEED_ENABLED", default=False)
        self.port = self._get_int("PORT", default=5000)
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            self.cors_allow_origins = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            self.cors_allow_origins = ["*"]

    @staticmethod
    def _get_int(key: str, default: Optional[int] = None) -> int:
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise RuntimeError(f"Missing required environment variable: {key}")
            return default
        try:
            return int(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be an integer") from exc

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        value = os.getenv(key)
        if value is None:
            return default
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off", ""}:
            return False
        raise RuntimeError(f"Environment variable {key} must be a boolean")
