import json
from functools import lru_cache
from typing import Annotated, List, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_ALLOWED_ORIGINS = [
    "http://127.0.0.1:5500",
    "http://localhost:5500",
    "https://goku-cmd-gokul.github.io",
]


def normalize_origin(origin: str) -> str:
    return origin.strip().rstrip("/").lower()


class Settings(BaseSettings):
    PROJECT_NAME: str = "Go Wheels Car Rental"

    # Server
    PORT: int = 5000
    ENVIRONMENT: str = "development"
    TIMEZONE: str = "UTC"

    # CORS
    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = DEFAULT_ALLOWED_ORIGINS

    # Supabase
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    BOOKINGS_TABLE: str = "bookings"

    # Email
    SMTP_SERVER: str = "smtp.gmail.com"
    SMTP_PORT: int = 465
    SMTP_USE_SSL: bool = True
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    EMAIL_FROM: str = ""
    EMAIL_TIMEOUT_SECONDS: float = 10.0

    # Branding
    COMPANY_NAME: str = "Go Wheels"
    CARS_PAGE_URL: str = "https://Goku-cmd-gokul.github.io/car-rental/car.html"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # Adds str(exc) to 500 bodies; leave off outside local debugging
    EXPOSE_ERROR_DETAIL: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def split_origins(cls, value: Union[str, List[str]]) -> List[str]:
        """
        Accepts the comma-separated form (ALLOWED_ORIGINS=a,b,c) as well as a list.
        Origins are compared the way browsers send them: lowercase, no trailing slash.
        """
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                value = json.loads(value)
            else:
                value = value.split(",")
        return [normalize_origin(origin) for origin in value if origin.strip()]

    @property
    def sender_address(self) -> str:
        return self.EMAIL_FROM or self.SMTP_USERNAME

    @property
    def show_error_detail(self) -> bool:
        return self.EXPOSE_ERROR_DETAIL


@lru_cache
def get_settings() -> Settings:
    return Settings()
