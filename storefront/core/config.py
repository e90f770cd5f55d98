"""Storefront Cart Configuration"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Storefront Cart"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8001

    # Pricing
    tax_rate: float = 0.08
    currency: str = "USD"
    # Upper bound on quantity when neither variant nor product tracks stock
    max_item_quantity: int = 999

    # Cart storage
    cart_storage_backend: str = "memory"  # "memory" or "file"
    cart_storage_dir: str = ".cart-storage"
    cart_storage_key: str = "onicommerce-cart"
    # Carts kept in memory; older ones are reloaded from storage on access
    max_cached_carts: int = 1000

    # Server cart reconciliation
    sync_base_url: Optional[str] = None
    sync_timeout: float = 10.0
    sync_token: Optional[str] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def sync_configured(self) -> bool:
        """Check if a server cart endpoint is configured"""
        return bool(self.sync_base_url)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
