from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
import os


class Settings(BaseSettings):
    APP_NAME: str = "Free Gift Bulk Coupons"
    DEBUG: bool = False

    DATABASE_PATH: str = os.getenv("DATABASE_PATH", "data/giftcoupons.db")

    @property
    def DATABASE_URL(self) -> str:
        # Always resolve path relative to backend directory, not current working directory
        db_path = self.DATABASE_PATH
        if not os.path.isabs(db_path):
            # giftcoupons/core/config.py -> giftcoupons/core -> giftcoupons -> backend
            backend_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
            db_path = os.path.join(backend_dir, db_path)
        return f"sqlite:///{os.path.abspath(db_path)}"

    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    HOST: str = "127.0.0.1"
    PORT: int = 8765

    # Required in X-Admin-API-Key header for admin endpoints (item catalogue, coupon generator)
    ADMIN_API_KEY: str = os.getenv("ADMIN_API_KEY", "")

    # Coupon generation
    COUPON_EXPIRY_DAYS: int = 365
    MAX_COUPONS_PER_BATCH: int = 100
    COUPON_PREFIX_MAX_LENGTH: int = 10
    BATCH_PACING_INTERVAL: int = 50  # pause after every N issued coupons
    BATCH_PACING_SECONDS: float = 0.1
    GENERATION_LOCK_TTL_SECONDS: int = 300  # 5 minutes
    ITEM_PICKER_CACHE_TTL: int = 3600

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"  # Ignore extra environment variables
    )


settings = Settings()
