"""
Core configuration settings for the Blog Engagement API
"""
from pydantic_settings import BaseSettings
from typing import List, Literal


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # App Config
    APP_NAME: str = "Blog Engagement"
    APP_ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api"

    # Database
    DATABASE_URL: str = "sqlite:///./blog.db"
    AUTO_CREATE_TABLES: bool = True

    # JWT
    JWT_SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Comments
    COMMENT_DEFAULT_STATUS: Literal["APPROVED", "PENDING"] = "APPROVED"
    COMMENT_MAX_LENGTH: int = 5000

    # Likes
    TOGGLE_MAX_RETRIES: int = 3

    # CORS
    CORS_ORIGINS: str = "*"

    @property
    def cors_origins_list(self) -> List[str]:
        """Convert CORS_ORIGINS string to list"""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        origins = [origin.strip() for origin in self.CORS_ORIGINS.split(",")]
        # Ensure local development ports are allowed if DEBUG is True
        if self.DEBUG:
            for dev_origin in ["http://localhost:3000", "http://127.0.0.1:3000"]:
                if dev_origin not in origins:
                    origins.append(dev_origin)
        return origins

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


# Create global settings instance
settings = Settings()
