import os
from dotenv import load_dotenv

load_dotenv()

APP_ENV = os.getenv("APP_ENV", "development").lower()
PORT = int(os.getenv("PORT", "5000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
API_VERSION = os.getenv("API_VERSION", "v1")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./identity_registry.db")
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if origin.strip()
]

# Pagination
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))
# largest value a 64-bit INTEGER column or OFFSET accepts
MAX_DB_INT = 2 ** 63 - 1
MAX_PAGE = MAX_DB_INT // MAX_PAGE_SIZE
SORTABLE_FIELDS = ["created_at", "updated_at", "name", "email"]
DEFAULT_SORT_FIELD = "created_at"
DEFAULT_SORT_DIRECTION = "desc"

SEARCH_TERM_MAX_LENGTH = int(os.getenv("SEARCH_TERM_MAX_LENGTH", "100"))

# Masking
AADHAAR_MASK_PREFIX = "XXXX-XXXX-"
PAN_MASK_PREFIX = "XXXXX"
MASK_VISIBLE_CHARS = 4
