"""Configuration management using Pydantic Settings"""

from decimal import Decimal
from typing import Any, Mapping, Optional

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from repayment_terms.domain.exceptions import FeePolicyError
from repayment_terms.domain.models import FeePolicy, FeeType


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "repayment-terms"
    log_level: str = "INFO"


class FeeSettings(BaseSettings):
    """Platform fee policy as configured by an admin (PLATFORM_FEE_* variables)"""

    model_config = SettingsConfigDict(
        env_prefix="PLATFORM_FEE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = False
    type: FeeType = FeeType.PERCENTAGE
    percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    fixed_amount: Decimal = Field(default=Decimal("0"), ge=0)
    min_fee: Decimal = Field(default=Decimal("0"), ge=0)  # 0 = no lower bound
    max_fee: Decimal = Field(default=Decimal("0"), ge=0)  # 0 = no upper bound
    fee_label: str = "Service Fee"
    fee_description: str = "Platform processing fee"

    @model_validator(mode="after")
    def check_fee_bounds(self) -> "FeeSettings":
        if self.min_fee > 0 and self.max_fee > 0 and self.min_fee > self.max_fee:
            raise ValueError(f"min_fee ({self.min_fee}) must not exceed max_fee ({self.max_fee})")
        return self

    def to_policy(self) -> FeePolicy:
        return FeePolicy(
            enabled=self.enabled,
            type=self.type,
            percentage=self.percentage,
            fixed_amount=self.fixed_amount,
            min_fee=self.min_fee,
            max_fee=self.max_fee,
            fee_label=self.fee_label,
            fee_description=self.fee_description,
        )


def load_fee_policy(data: Optional[Mapping[str, Any]] = None) -> FeePolicy:
    """
    Validate fee settings once per session and return the policy.

    Args:
        data: Admin-configured settings; fields it omits fall back to the
            environment, then to defaults

    Raises:
        FeePolicyError: negative amounts, percentage outside 0-100,
            min_fee above max_fee, or an unknown fee type
    """
    try:
        fee_settings = FeeSettings(**dict(data)) if data is not None else FeeSettings()
    except ValidationError as e:
        raise FeePolicyError(f"Invalid platform fee configuration: {e}") from e
    return fee_settings.to_policy()


settings = Settings()
