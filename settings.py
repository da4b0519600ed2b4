# settings.py  (Pydantic v2)
from pathlib import Path
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # env
    ENV: str = Field(default="dev")
    DEBUG: bool = True

    # DB
    DATABASE_URL: str

    # sessions
    SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    SESSION_COOKIE_NAME: str = "token"
    SESSION_EXPIRE_DAYS: int = 7

    # misc
    FRONTEND_URL: Optional[str] = None

    # pydantic-settings config
    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).with_name(".env")),
        case_sensitive=True,
        extra="ignore",               # <-- tolerate unknown env vars
    )

    @property
    def is_prod(self) -> bool:
        return self.ENV.lower() in ("prod", "production")

settings = Settings()
