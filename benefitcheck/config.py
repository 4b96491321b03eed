"""
Configuration settings for the Benefit Eligibility Verification Engine
"""
from datetime import tzinfo
from typing import List, Optional
from zoneinfo import ZoneInfo

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # MongoDB Configuration
    mongodb_url: str = Field(default="mongodb://localhost:27017")
    mongodb_db_name: str = Field(default="benefitcheck")

    # Application Configuration
    app_name: str = Field(default="Benefit Eligibility Verification Engine")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # API Configuration
    api_prefix: str = Field(default="/api/v1")
    cors_origins: str = Field(default="http://localhost:3000,http://localhost:8081")

    # Evaluation Configuration
    store_timeout_seconds: float = Field(
        default=3.0,
        gt=0,
        description="Upper bound for a single rule-store or audit-log round-trip"
    )
    subsidy_service_types: str = Field(
        default="pds_verification,ration_portability",
        description="Services whose entitlement is computed from a commodity table"
    )
    ledger_timezone: Optional[str] = Field(
        default=None,
        description="IANA zone used for calendar-month boundaries (system local time if unset)"
    )
    history_page_limit: int = Field(default=10, ge=1, le=100)

    def get_cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list"""
        return _split_csv(self.cors_origins)

    def get_subsidy_service_types(self) -> List[str]:
        """Get subsidy-family service types as a list"""
        return _split_csv(self.subsidy_service_types)

    def get_ledger_timezone(self) -> Optional[tzinfo]:
        """Timezone for month boundaries, or None for the system local zone"""
        if self.ledger_timezone:
            return ZoneInfo(self.ledger_timezone)
        return None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


# Create global settings instance
settings = Settings()
