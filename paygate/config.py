import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Force-load .env (Windows-safe, reload-safe)
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH)


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str]
    razorpay_key_id: Optional[str]
    razorpay_key_secret: Optional[str]
    razorpay_webhook_secret: Optional[str]
    razorpay_timeout: float
    currency: str
    jwt_secret: Optional[str]
    log_level: str
    service_name: str

    @property
    def razorpay_configured(self) -> bool:
        return bool(self.razorpay_key_id and self.razorpay_key_secret)


def get_settings() -> Settings:
    """Read settings from the environment (after .env has been loaded)."""
    return Settings(
        database_url=os.getenv("DATABASE_URL"),
        razorpay_key_id=os.getenv("RAZORPAY_KEY_ID"),
        razorpay_key_secret=os.getenv("RAZORPAY_KEY_SECRET"),
        razorpay_webhook_secret=os.getenv("RAZORPAY_WEBHOOK_SECRET"),
        razorpay_timeout=float(os.getenv("RAZORPAY_TIMEOUT", "10")),
        currency=os.getenv("PAYMENT_CURRENCY", "INR"),
        jwt_secret=os.getenv("JWT_SECRET"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        service_name=os.getenv("SERVICE_NAME", "paygate"),
    )
