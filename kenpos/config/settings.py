"""
Till configuration.

Every section reads its own environment prefix (``TAX_VAT_RATE``,
``SYNC_ENDPOINT_URL`` and so on) and falls back to the defaults below, which
describe a single Kenyan till pricing VAT inclusively at 16%. Pricing,
loyalty and numbering values are read-only inputs to checkout.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Where the till database lives and how it is opened."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "kenpos.db"
    pool_size: int = Field(default=5, ge=1)
    busy_timeout: int = 30000  # milliseconds SQLite waits on a locked file

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class TaxSettings(BaseSettings):
    """VAT applied to taxable products."""

    model_config = SettingsConfigDict(env_prefix="TAX_")

    vat_enabled: bool = True
    vat_rate: float = Field(default=16.0, ge=0, le=100)  # percent
    pricing_type: Literal["inclusive", "exclusive"] = "inclusive"

    @property
    def effective_rate(self) -> float:
        """VAT rate as a fraction, zero when VAT is switched off."""
        return self.vat_rate / 100 if self.vat_enabled else 0.0


class DiscountSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DISCOUNT_")

    enabled: bool = True
    type: Literal["percentage", "fixed"] = "percentage"
    max_value: float = Field(default=10.0, ge=0)


class LoyaltySettings(BaseSettings):
    """Points earned per sale and what a point is worth at redemption."""

    model_config = SettingsConfigDict(env_prefix="LOYALTY_")

    enabled: bool = True
    points_per_currency_unit: float = Field(default=100.0, gt=0)
    redemption_rate: float = Field(default=0.5, gt=0)
    min_redeemable_points: int = Field(default=0, ge=0)
    max_redemption_percentage: float = Field(default=30.0, ge=0, le=100)
    default_customer_id: str = "cust001"  # walk-in


class ReceiptSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RECEIPT_")

    invoice_prefix: str = "INV-"
    quote_prefix: str = "QUO-"
    po_number_prefix: str = "PO-"


class SyncSettings(BaseSettings):
    """Remote endpoint that receives sales recorded while offline."""

    model_config = SettingsConfigDict(env_prefix="SYNC_")

    endpoint_url: str | None = None
    api_key: str | None = None
    timeout: int = 15

    # Breaker: consecutive failures before pushes stop, then seconds to wait
    failure_threshold: int = Field(default=3, ge=1)
    cooldown_seconds: int = Field(default=60, ge=0)

    # Backoff between attempts of a single push
    max_retries: int = Field(default=3, ge=1)
    retry_delay: float = 1.0
    retry_multiplier: float = 2.0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "KenPOS"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    tax: TaxSettings = Field(default_factory=TaxSettings)
    discount: DiscountSettings = Field(default_factory=DiscountSettings)
    loyalty: LoyaltySettings = Field(default_factory=LoyaltySettings)
    receipt: ReceiptSettings = Field(default_factory=ReceiptSettings)
    sync: SyncSettings = Field(default_factory=SyncSettings)

    @model_validator(mode="after")
    def create_data_dir(self) -> "Settings":
        self.storage.data_dir.mkdir(parents=True, exist_ok=True)
        return self


_settings: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, read from the environment on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
