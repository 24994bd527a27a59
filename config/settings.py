from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from dotenv import load_dotenv

# Load .env file into os.environ BEFORE pydantic reads it so Celery workers
# and the API process see the same configuration
load_dotenv()


class Settings(BaseSettings):
    # Optional app/server/database fields (in .env)
    DATABASE_URL: Optional[str] = None
    API_HOST: str = "127.0.0.1"
    API_PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # API Security
    API_SECRET_KEY: Optional[str] = None

    # Redis & Celery Configuration
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/1"
    AUTOMATION_SWEEP_INTERVAL_MINUTES: int = 60
    EMAIL_QUEUE_DRAIN_INTERVAL_MINUTES: int = 5

    # Automation sweep: max candidates processed per rule per sweep
    AUTOMATION_BATCH_LIMIT: int = 100

    # Interview scheduling
    INTERVIEW_DEFAULT_DURATION: int = 60  # minutes
    INTERVIEW_BUFFER_MINUTES: int = 0  # 0 keeps back-to-back slots bookable
    BUSINESS_DAY_START_HOUR: int = 9
    BUSINESS_DAY_END_HOUR: int = 17
    SLOT_STEP_MINUTES: int = 30
    SLOT_SEARCH_MAX_DAYS: int = 14
    ALLOW_PAST_SCHEDULING: bool = False

    # Outbound email: "log" (write to logger only) or "http" (provider API)
    EMAIL_PROVIDER: str = "log"
    EMAIL_PROVIDER_URL: Optional[str] = None
    EMAIL_PROVIDER_API_KEY: Optional[str] = None
    EMAIL_FROM_ADDRESS: str = "no-reply@hiring.local"
    EMAIL_TIMEOUT_SECONDS: int = 10

    # Outbox retry policy
    EMAIL_MAX_ATTEMPTS: int = 5
    EMAIL_RETRY_BASE_SECONDS: int = 60
    # A drain that dies mid-send releases its claim after this long
    EMAIL_SEND_LEASE_SECONDS: int = 300

    # pydantic-settings v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",  # ignore unknown env vars instead of raising errors
    )


settings = Settings()
