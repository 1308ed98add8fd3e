from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Merchant credentials
    PAYCONIQ_API_KEY: Optional[str] = None
    PAYCONIQ_ENVIRONMENT: str = "prod"

    # Explicit base URL, wins over PAYCONIQ_ENVIRONMENT when set
    PAYCONIQ_ENDPOINT: Optional[str] = None

    PAYCONIQ_PROD_URL: str = "https://api.payconiq.com/v3"
    PAYCONIQ_EXT_URL: str = "https://api.ext.payconiq.com/v3"

    # HTTP
    HTTP_TIMEOUT_SEC: int = 20
    HTTP_CONNECT_TIMEOUT_SEC: int = 20
