import os
from typing import List
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_flag(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings:
    def __init__(self):
        self.database_url: str = os.getenv("DATABASE_URL", "sqlite:///./tournament.db")
        self.debug: bool = _env_flag("DEBUG")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

        origins = os.getenv("CORS_ORIGINS", "")
        self.cors_origins: List[str] = [o.strip() for o in origins.split(",") if o.strip()] or [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
        ]

        # Courts are numbered 1..court_count
        self.court_count: int = int(os.getenv("COURT_COUNT", 4))

        # Restart policy: False keeps scores, True zeroes them (older behaviour)
        self.restart_resets_scores: bool = _env_flag("RESTART_RESETS_SCORES")

        self.run_migrations: bool = _env_flag("RUN_MIGRATIONS")
        self.ws_heartbeat_interval: int = int(os.getenv("WS_HEARTBEAT_INTERVAL", 30))


settings = Settings()
