import os
from dotenv import load_dotenv


class Settings:
    def __init__(self) -> None:
        # Load variables from .env into environment
        load_dotenv()
        self.SECRET_KEY: str = os.getenv("SECRET_KEY", "changeme")
        # Remote HR API that owns lookups, employee records and inserts
        self.HR_API_BASE_URL: str = os.getenv("HR_API_BASE_URL", "http://127.0.0.1:8000").rstrip("/")
        self.HR_API_TIMEOUT: float = float(os.getenv("HR_API_TIMEOUT", "10"))
        # JWT claim carrying the user code stamped into Entered_By
        self.ENTERED_BY_CLAIM: str = os.getenv("ENTERED_BY_CLAIM", "user_code")
        # Frontend base URL (used in CORS)
        # Default to local Vite dev server
        self.FRONTEND_BASE_URL: str = os.getenv("FRONTEND_BASE_URL", "http://localhost:8080")
        # Optional comma-separated list of additional allowed origins for CORS
        self.ALLOWED_ORIGINS: list[str] = [
            o.strip() for o in os.getenv("ALLOWED_ORIGINS", "").split(",") if o.strip()
        ]


settings = Settings()
