from typing import List, Optional
from zoneinfo import ZoneInfo
from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# PORT and friends are read straight from os.environ by main.py
load_dotenv()

PLACEHOLDER_VALUES = {"", "YOUR_DATABASE_URL", "changeme"}

class Settings(BaseSettings):
    DATABASE_URL: str = ""
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_HOST: str = ""
    POSTGRES_PORT: str = "6543"
    POSTGRES_DB: str = "postgres"

    ADMIN_PASSWORD: str = ""
    USER_PASSWORD: str = ""

    SHOP_TIMEZONE: str = "Asia/Ho_Chi_Minh"
    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

    @property
    def database_url(self) -> Optional[str]:
        if self.DATABASE_URL not in PLACEHOLDER_VALUES:
            return self.DATABASE_URL
        if self.POSTGRES_HOST not in PLACEHOLDER_VALUES:
            return (
                f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
                f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )
        return None

    @property
    def shop_tz(self) -> ZoneInfo:
        return ZoneInfo(self.SHOP_TIMEZONE)

settings = Settings()
