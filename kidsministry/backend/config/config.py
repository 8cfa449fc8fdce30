import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """
    Settings read straight from environment variables.
    """
    # Redis
    APPLICATION_REDIS_URL: str = os.environ.get("APPLICATION_REDIS_URL", "redis://localhost:6379/0")
    RATE_LIMITER_REDIS_URL: str = os.environ.get("RATE_LIMITER_REDIS_URL", "memory://")
    # Every persisted slot key is prefixed with this namespace, e.g. "ebi_children".
    STORE_NAMESPACE: str = os.environ.get("STORE_NAMESPACE", "ebi")

    # Login gate
    ADMIN_EMAIL: str = os.environ.get("ADMIN_EMAIL", "admin@ebi.com")
    ADMIN_PASSWORD: str = os.environ.get("ADMIN_PASSWORD", "123456")

    # Generative AI
    GEMINI_API_KEY: str = os.environ.get("GEMINI_API_KEY")
    GEMINI_API_URL: str = os.environ.get("GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta")
    GEMINI_TEXT_MODEL: str = os.environ.get("GEMINI_TEXT_MODEL", "gemini-2.5-flash")
    GEMINI_IMAGE_MODEL: str = os.environ.get("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image")
    AI_REQUEST_TIMEOUT_SECONDS: float = float(os.environ.get("AI_REQUEST_TIMEOUT_SECONDS", 60))

    # Derived views
    THEME_HISTORY_LIMIT: int = int(os.environ.get("THEME_HISTORY_LIMIT", 5))
    RECENT_MESSAGES_LIMIT: int = int(os.environ.get("RECENT_MESSAGES_LIMIT", 3))

    LOG_DIR: str = os.environ.get("LOG_DIR", "logs")

# Single importable settings instance
settings = Config()
