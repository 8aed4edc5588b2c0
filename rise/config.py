# rise/config.py
"""Application configuration for the RISE Research backend."""
import logging
import os
from typing import List, Optional

from dotenv import load_dotenv

from rise.errors import ConfigurationError

load_dotenv()

logger = logging.getLogger(__name__)


class Config:
    """Base configuration read from the environment."""

    # Environment
    ENV: str = os.getenv("ENV", "prod")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    TESTING: bool = False

    # Airtable Configuration (REQUIRED)
    AIRTABLE_PERSONAL_ACCESS_TOKEN: str = os.getenv(
        "AIRTABLE_PERSONAL_ACCESS_TOKEN", ""
    )
    AIRTABLE_TIMEOUT_SECONDS: float = float(os.getenv("AIRTABLE_TIMEOUT_SECONDS", "10"))
    AIRTABLE_GET_RETRIES: int = int(os.getenv("AIRTABLE_GET_RETRIES", "1"))
    STORE_MAX_WORKERS: int = int(os.getenv("STORE_MAX_WORKERS", "5"))

    # Contact base holds every table a signed-in user can be found in
    CONTACT_BASE_ID: str = os.getenv("CONTACT_BASE_ID", "")
    AUTH_TABLES: List[str] = ["Students", "Parents", "Mentors", "Writing Coaches", "Team"]

    # Scheduling
    SCHEDULING_BASE_ID: str = os.getenv(
        "SCHEDULING_BASE_ID", os.getenv("CONTACT_BASE_ID", "")
    )
    ENROLLMENTS_TABLE: str = os.getenv("ENROLLMENTS_TABLE", "Active Programs")
    AVAILABILITY_TABLE: str = os.getenv("AVAILABILITY_TABLE", "Student Availability")

    # Invoicing / reports
    INVOICING_BASE_ID: str = os.getenv("INVOICING_BASE_ID", "")
    CLASSES_TABLE: str = os.getenv("CLASSES_TABLE", "Classes")
    REPORTS_BASE_ID: str = os.getenv("REPORTS_BASE_ID", "")
    REPORTS_TABLE_ID: str = os.getenv("REPORTS_TABLE_ID", "")

    # Google Sign-In
    GOOGLE_CLIENT_ID: Optional[str] = os.getenv("GOOGLE_CLIENT_ID") or None

    # CORS
    CORS_ORIGINS: str = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:5173,https://riseresearch.vercel.app,https://rise-research-xa8a.vercel.app",
    )

    def require(self, *names: str) -> None:
        """Fail fast when any of the named settings is empty."""
        missing = [name for name in names if not getattr(self, name, None)]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

    def validate_required_config(self):
        """Validate that required configuration is present."""
        self.require("AIRTABLE_PERSONAL_ACCESS_TOKEN", "CONTACT_BASE_ID")

    def get_store_info(self) -> dict:
        """Get record store configuration for debugging."""
        return {
            "airtable_token": "SET" if self.AIRTABLE_PERSONAL_ACCESS_TOKEN else "NOT SET",
            "contact_base_id": self.CONTACT_BASE_ID or "NOT SET",
            "scheduling_base_id": self.SCHEDULING_BASE_ID or "NOT SET",
            "invoicing_base_id": self.INVOICING_BASE_ID or "NOT SET",
            "reports_base_id": self.REPORTS_BASE_ID or "NOT SET",
            "auth_tables": self.AUTH_TABLES,
        }


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True
    ENV = "dev"


class TestingConfig(Config):
    """Testing configuration."""

    TESTING = True
    ENV = "test"
    DEBUG = True
    AIRTABLE_PERSONAL_ACCESS_TOKEN = "test-token"
    CONTACT_BASE_ID = "appContact"
    SCHEDULING_BASE_ID = "appScheduling"
    INVOICING_BASE_ID = "appInvoicing"
    REPORTS_BASE_ID = "appReports"
    REPORTS_TABLE_ID = "tblReports"
    GOOGLE_CLIENT_ID = "test-client-id.apps.googleusercontent.com"


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False
    ENV = "prod"

    def __init__(self):
        super().__init__()
        try:
            self.validate_required_config()
        except ConfigurationError as e:
            logger.warning(f"⚠️ Configuration Warning: {str(e)}")
        if not self.GOOGLE_CLIENT_ID:
            logger.warning("⚠️ GOOGLE_CLIENT_ID not set: Google sign-in will be refused")


def get_config(env: str = None) -> Config:
    """Get configuration based on environment."""
    if env is None:
        env = os.getenv("ENV", "prod")

    configs = {
        "dev": DevelopmentConfig,
        "development": DevelopmentConfig,
        "test": TestingConfig,
        "testing": TestingConfig,
        "prod": ProductionConfig,
        "production": ProductionConfig,
    }

    config_class = configs.get(env.lower(), ProductionConfig)
    return config_class()
