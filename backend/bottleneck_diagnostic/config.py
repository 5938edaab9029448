from typing import Optional, List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application configuration with environment variable support"""

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False
    RELOAD: bool = False
    LOG_LEVEL: str = "INFO"

    # Branding shown to visitors and named in the assistant persona
    BRAND_NAME: str = "NovaMentors"
    DIAGNOSTIC_TITLE: str = "Manager’s Bottleneck Diagnostic"
    BOOKING_URL: str = "https://calendar.app.google/xiA5mmnkpeKbmcAP9"

    # Assistant settings
    API_KEY: Optional[str] = None  # Generative AI provider credential
    ASSISTANT_MODEL: str = "gemini-3-flash-preview"
    ASSISTANT_TEMPERATURE: float = 0.7
    ASSISTANT_TIMEOUT_SECONDS: float = 30.0

    # CORS settings
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    @property
    def assistant_configured(self) -> bool:
        return bool(self.API_KEY and self.API_KEY.strip())

settings = Settings()
