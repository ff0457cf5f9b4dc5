"""
Application configuration

SECURITY: Defaults are fail-safe for production.
- DEBUG defaults to False
- AUSPOST_API_KEY and ADMIN_API_TOKEN have no usable defaults in production
- Runtime validation catches insecure configurations

Shipping thresholds reflect real carrier service boundaries (parcel vs
freight/pallet tiers). They live here so they can be tuned per deployment.
"""
import json
import logging
from typing import List, Union
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Default CORS origins
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "https://partedeuro.com.au",
    "https://www.partedeuro.com.au",
]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    # App - defaults are PRODUCTION safe
    APP_NAME: str = "Parted Euro Shipping"
    DEBUG: bool = False  # SECURE DEFAULT: off in production
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"

    # CORS - accepts JSON array or comma-separated string
    CORS_ORIGINS: Union[str, List[str]] = DEFAULT_CORS_ORIGINS

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            if not v or v.strip() == "":
                return DEFAULT_CORS_ORIGINS
            # Try JSON first
            if v.startswith("["):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            # Fallback to comma-separated
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # Admin override - callers presenting this token get the "Admin Shipping" option
    ADMIN_API_TOKEN: str = ""

    # AusPost PAC API
    AUSPOST_API_KEY: str = ""
    AUSPOST_BASE_URL: str = "https://digitalapi.auspost.com.au"
    AUSPOST_INTERNATIONAL_SERVICES: List[str] = ["Standard", "Express"]
    PRIORITY_COUNTRIES: List[str] = ["US", "GB", "CA", "BR"]

    # Interparcel (freight broker)
    INTERPARCEL_API_URL: str = "https://au.interparcel.com/api"
    INTERPARCEL_SITE_URL: str = "https://au.interparcel.com"
    INTERPARCEL_SESSION_MAX_HOPS: int = 5
    INTERPARCEL_MAX_OPTIONS: int = 4
    INTERPARCEL_EXCLUDED_CARRIERS: List[str] = ["Hunter"]

    # Shipping origin (single warehouse)
    SHIPPING_ORIGIN_CITY: str = "Knoxfield"
    SHIPPING_ORIGIN_STATE: str = "VIC"
    SHIPPING_ORIGIN_POSTCODE: str = "3180"
    SHIPPING_ORIGIN_COUNTRY_NAME: str = "Australia"

    # Quote policy
    SHIPPING_CURRENCY: str = "AUD"
    DOMESTIC_COUNTRY_CODE: str = "AU"
    HEAVY_WEIGHT_THRESHOLD_KG: float = 20.0
    PARCEL_DIMENSION_LIMIT_CM: float = 105.0
    PALLET_WEIGHT_THRESHOLD_KG: float = 35.0
    MAX_SHIPPING_OPTIONS: int = 4
    PICKUP_DISPLAY_NAME: str = "Pickup from Parted Euro"
    ADMIN_SHIPPING_DISPLAY_NAME: str = "Admin Shipping"

    # Per HTTP call timeout for carrier APIs (seconds)
    CARRIER_TIMEOUT_SECONDS: float = 12.0

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "100/minute"
    RATE_LIMIT_SHIPPING: str = "30/minute"

    @field_validator("SHIPPING_CURRENCY", "DOMESTIC_COUNTRY_CODE")
    @classmethod
    def uppercase_codes(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def validate_production_config(self):
        """Runtime validation to catch insecure production configurations."""
        if self.ENVIRONMENT == "production":
            errors = []

            if self.DEBUG:
                errors.append(
                    "DEBUG=True is forbidden in production. "
                    "Set DEBUG=false or ENVIRONMENT=development"
                )

            if not self.AUSPOST_API_KEY:
                errors.append("AUSPOST_API_KEY is required in production.")

            if not self.ADMIN_API_TOKEN or len(self.ADMIN_API_TOKEN) < 32:
                errors.append(
                    "ADMIN_API_TOKEN must be set (32+ chars) in production. "
                    "Generate with: python -c 'import secrets; print(secrets.token_urlsafe(32))'"
                )

            for origin in self.CORS_ORIGINS:
                if origin == "*":
                    errors.append("Wildcard '*' CORS origin is forbidden in production")

            if errors:
                raise ValueError(
                    "PRODUCTION CONFIG VIOLATIONS:\n" + "\n".join(f"  - {e}" for e in errors)
                )

        return self


settings = Settings()
