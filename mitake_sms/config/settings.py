from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://smsapi.mitake.com.tw/api/mtk/"


class MitakeSettings(BaseSettings):
    # MITAKE_USERNAME, MITAKE_PASSWORD, ... are read when an instance is built.
    model_config = SettingsConfigDict(
        env_prefix="MITAKE_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
        validate_assignment=True,
    )

    # Credentials. Left empty, the gateway answers 401.
    username: str = Field(default="")
    password: str = Field(default="")

    api_url: str = Field(default=DEFAULT_API_URL)  # endpoints are relative to this

    # Seconds
    timeout: float = Field(default=30)
    open_timeout: float = Field(default=5)
