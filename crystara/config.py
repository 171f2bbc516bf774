"""Crystara backend configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


def validate_currency(value: Optional[str]) -> str:
    if value is not None and not isinstance(value, str):
        raise ValueError("Invalid currency code: expected ISO4217 length 3")
    v = (value or "INR").strip().upper()
    if len(v) != 3 or not v.isalpha():
        raise ValueError("Invalid currency code: expected ISO4217 length 3")
    return v


@dataclass
class CrystaraConfig:
    """Settings consumed by the API server."""

    razorpay_key_id: str
    razorpay_key_secret: str
    razorpay_api_url: str
    database_url: str
    jwt_secret: str
    jwt_audience: str
    cors_origin: str
    port: int
    log_level: str
    default_currency: str

    @property
    def gateway_configured(self) -> bool:
        return bool(self.razorpay_key_id and self.razorpay_key_secret)

    @classmethod
    def load(cls, env_file: Optional[str] = None) -> "CrystaraConfig":
        """Build the configuration from environment variables (and `.env` if present)."""

        load_dotenv(env_file)

        return cls(
            razorpay_key_id=os.getenv("RAZORPAY_KEY_ID", ""),
            razorpay_key_secret=os.getenv("RAZORPAY_KEY_SECRET", ""),
            razorpay_api_url=os.getenv("RAZORPAY_API_URL", "https://api.razorpay.com/v1").rstrip("/"),
            database_url=os.getenv("DATABASE_URL", "sqlite:///data/crystara.db"),
            jwt_secret=os.getenv("SUPABASE_JWT_SECRET", ""),
            jwt_audience=os.getenv("SUPABASE_JWT_AUDIENCE", "authenticated"),
            cors_origin=os.getenv("CORS_ORIGIN", "http://localhost:5173"),
            port=int(os.getenv("PORT", "5001")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            default_currency=validate_currency(os.getenv("DEFAULT_CURRENCY")),
        )
