"""Cart Engine Configuration"""

from typing import Optional
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..services.pricing import PricingPolicy


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    model_config = SettingsConfigDict(
        env_prefix="CART_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Cart Engine"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8001
    log_level: str = "INFO"

    # Pricing (amounts in the smallest currency unit)
    currency: str = "INR"
    tax_rate: float = Field(default=0.05, ge=0)
    free_shipping_threshold: int = Field(default=50000, ge=0)
    shipping_fee: int = Field(default=5000, ge=0)

    # Local durable storage
    storage_dir: str = ".cart-storage"
    storage_key: str = "cart"
    max_live_sessions: int = Field(default=1024, ge=1)

    # Analytics
    analytics_url: Optional[str] = None
    analytics_timeout: float = 2.0

    def pricing_policy(self) -> PricingPolicy:
        """Build the pricing policy handed to the calculator"""
        return PricingPolicy(
            tax_rate=self.tax_rate,
            free_shipping_threshold=self.free_shipping_threshold,
            shipping_fee=self.shipping_fee,
            currency=self.currency,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
