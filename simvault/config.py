"""Configuration management using Pydantic settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VaultSettings(BaseSettings):
    """Vault and simulation defaults, overridable through SIMVAULT_* variables."""

    model_config = SettingsConfigDict(
        env_prefix="SIMVAULT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Collateral ratio controller (ratios scaled by 1e4)
    collateral_ratio: int = Field(default=15000, description="Initial collateral ratio")
    target_collateral_ratio: int = Field(default=15000, description="Ratio above which buybacks open")
    min_collateral_ratio: int = Field(default=11000, description="Lower saturation bound")
    max_collateral_ratio: int = Field(default=20000, description="Upper saturation bound")
    adjustment_coefficient: int = Field(default=100, description="Ratio units per 1.0 of peg deviation")

    # Deployment
    collateral_decimals: int = Field(default=18, description="Decimals of the collateral token")

    # General
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="", description="Optional file the simulation logs are copied to")


# Global settings instance
settings = VaultSettings()
