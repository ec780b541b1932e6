import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# Remote attendance service
API_CONFIG = {
    "base_url": os.getenv("API_BASE_URL", "http://localhost:5000/api"),
    "token": os.getenv("API_TOKEN", ""),
    "timeout": float(os.getenv("API_TIMEOUT", "10")),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

WINDOW_DAYS = int(os.getenv("WINDOW_DAYS", "7"))
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
EXPORT_DIR = os.getenv("EXPORT_DIR", "exports")
