from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict


# Get the path to the .env file
CONFIG_DIR = Path(__file__).resolve().parent
# Assuming .env is in the project root (two levels up from interview_generator/core)
PROJECT_ROOT = CONFIG_DIR.parent.parent
ENV_FILE_PATH = PROJECT_ROOT / '.env'

# Load environment variables from .env file
load_dotenv(ENV_FILE_PATH)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE_PATH),
        env_file_encoding='utf-8',
        extra='ignore'
    )


    DEBUG_MODE: bool = False
    # Skips the generation backend and loads the bundled sample interviews
    DEVELOPMENT_MODE: bool = False


    # Stripe
    STRIPE_SECRET_KEY: str = ""
    STRIPE_PRICE_ID: str = ""
    STRIPE_API_VERSION: str = "2025-01-27.acacia"
    CHECKOUT_COUNTRY: str = "USA"


    # Service URLs
    API_URL: str = "http://localhost:8080"  # AI generation backend (job start + status)
    APP_URL: str = "http://localhost:8000"  # This server (checkout + export routes)

    # Interview Count Bounds
    MIN_INTERVIEW_COUNT: int = 5
    MAX_INTERVIEW_COUNT: int = 20
    DEFAULT_INTERVIEW_COUNT: int = 5
    MINUTES_PER_INTERVIEW: int = 2  # Used for the generation time estimate

    # Polling Configuration (seconds)
    JOB_STATUS_POLLING_INTERVAL: float = 15.0

    # Timeout Configuration (seconds)
    REQUEST_TIMEOUT: float = 30.0

    # File Delivery
    VIEW_CLEANUP_DELAY: float = 1.0  # Delay before a viewed export file is removed
    DOWNLOAD_DIR: Path = Path.home() / "Downloads"


# Initialize settings
settings = Settings()
