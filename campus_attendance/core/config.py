from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field(..., alias="DATABASE_URL")

    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    default_department: str = Field("General", alias="DEFAULT_DEPARTMENT")
    default_cycle_days: int = Field(6, alias="DEFAULT_CYCLE_DAYS")

    # When set, day order is read from this endpoint instead of the local tables.
    day_order_service_url: Optional[str] = Field(None, alias="DAY_ORDER_SERVICE_URL")
    day_order_lookup_timeout_seconds: float = Field(5.0, alias="DAY_ORDER_LOOKUP_TIMEOUT_SECONDS")

    transfer_duplicate_policy: Literal["allow", "reject"] = Field("allow", alias="TRANSFER_DUPLICATE_POLICY")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    admin_email: Optional[str] = Field(None, alias="ADMIN_EMAIL")
    admin_password: Optional[str] = Field(None, alias="ADMIN_PASSWORD")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
