import os

# -----------------------------
# Environment configuration
# -----------------------------
DB_FILE = os.getenv("CASHBACK_DB_FILE", ":memory:")
LOG_FILE = os.getenv("CASHBACK_LOG_FILE")
LOG_LEVEL = os.getenv("CASHBACK_LOG_LEVEL", "INFO").upper()

HOST = os.getenv("CASHBACK_HOST", "0.0.0.0")
PORT = int(os.getenv("CASHBACK_PORT", "3000"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CASHBACK_CORS_ORIGINS", "*").split(",")
    if origin.strip()
]
