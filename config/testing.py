SECRET_KEY = "test-secret"

API_CONFIG = {
    "base_url": "http://attendance.test/api",
    "token": "test-token",
    "timeout": 1.0,
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

WINDOW_DAYS = 7
DEFAULT_PAGE_SIZE = 10
EXPORT_DIR = "exports"
