"""
Application settings and configuration
"""

import os
from pathlib import Path
from dotenv import load_dotenv
from typing import Optional
from podio_tasks.config.constants import (
    PODIO_API_BASE_URL,
    REQUEST_TIMEOUT,
    DEFAULT_TASK_TIMEZONE,
)

# Load environment variables from .env file
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


class Settings:
    """Application settings loaded from environment variables"""
    
    # Podio
    PODIO_API_BASE_URL: str = os.getenv("PODIO_API_BASE_URL", PODIO_API_BASE_URL)
    PODIO_ACCESS_TOKEN: str = os.getenv("PODIO_ACCESS_TOKEN", "")
    PODIO_USER_ID: Optional[int] = (
        int(os.environ["PODIO_USER_ID"]) if os.getenv("PODIO_USER_ID") else None
    )
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", str(REQUEST_TIMEOUT)))
    
    # Due date bucketing
    TASK_TIMEZONE: str = os.getenv("TASK_TIMEZONE", DEFAULT_TASK_TIMEZONE)
    
    # Application
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR: Optional[str] = os.getenv("LOG_DIR") or None
    
    @classmethod
    def validate(cls) -> bool:
        """Validate that all required settings are present"""
        required = {
            "PODIO_ACCESS_TOKEN": cls.PODIO_ACCESS_TOKEN,
        }
        
        missing = [name for name, value in required.items() if not value]
        
        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}"
            )
        
        return True


# Global settings instance
settings = Settings()
