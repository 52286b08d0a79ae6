import os
from dotenv import load_dotenv

load_dotenv()  # Load .env before any setting is read


class Settings:
    # Document store. No default URI: an unset value means the store is not configured.
    MONGODB_URI = os.getenv("MONGODB_URI")
    MONGODB_DB = os.getenv("MONGODB_DB", "pos_time_tracking")
    MONGODB_TIMEOUT_MS = int(os.getenv("MONGODB_TIMEOUT_MS", "5000"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Rate limiting
    RATE_LIMIT = int(os.getenv("RATE_LIMIT", "240"))
    RATE_LIMIT_WINDOW = int(os.getenv("RATE_LIMIT_WINDOW", "60"))  # seconds
    DISABLE_RATE_LIMIT = os.getenv("DISABLE_RATE_LIMIT", "0") == "1"
    REDIS_URL = os.getenv("REDIS_URL")

    # Used by the POS clock widget
    API_URL = os.getenv("TIME_TRACKING_API_URL", "http://localhost:8000")

    @property
    def store_configured(self) -> bool:
        return bool(self.MONGODB_URI)


settings = Settings()
