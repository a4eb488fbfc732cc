from pydantic import field_validator
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    # YaYa Wallet credentials, read once at startup
    yaya_api_key: str
    yaya_api_secret: str
    yaya_api_base_url: str = "https://sandbox.yayawallet.com"

    # Page parameter name expected by find-by-user ("p" on the current API version)
    yaya_page_param: str = "p"

    cors_origins: str = "*"
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        frozen = True

    @field_validator("yaya_api_key", "yaya_api_secret")
    @classmethod
    def credentials_present(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("YaYa Wallet API credentials not configured")
        return value

    @field_validator("yaya_api_base_url")
    @classmethod
    def base_url_present(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("YaYa Wallet API base URL not configured")
        return value.strip().rstrip("/")

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings():
    return Settings()
