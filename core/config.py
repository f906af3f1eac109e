import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    APP_NAME: str = "FireTrack"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Auth (tokens are issued by the external identity provider)
    SECRET_KEY: str = os.getenv("SECRET_KEY", "supersecretkey123")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")

    # Database
    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    DB_NAME: str = os.getenv("DB_NAME", "firetrack")

    # Frontend
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # Streak Calculation
    # Only the most recent N entries of a habit are scanned per run.
    STREAK_SCAN_LIMIT: int = int(os.getenv("STREAK_SCAN_LIMIT", "120"))
    STREAK_RECALC_INTERVAL_HOURS: int = int(os.getenv("STREAK_RECALC_INTERVAL_HOURS", "24"))
    SCHEDULER_ENABLED: bool = os.getenv("SCHEDULER_ENABLED", "true").lower() == "true"
    # Bearer key for POST /streaks/calculate (external cron). Empty disables the endpoint.
    STREAK_JOB_API_KEY: str = os.getenv("STREAK_JOB_API_KEY", "")

    # Pydantic Settings Config
    model_config = {"env_file": ".env", "extra": "ignore"}

settings = Settings()
