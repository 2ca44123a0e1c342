# config.py
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "").strip()
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "5"))
DB_ECHO = os.getenv("DB_ECHO", "false").strip().lower() in ("1", "true", "yes")

CORS_ORIGINS = [
  x.strip()
  for x in os.getenv("CORS_ORIGINS", "http://127.0.0.1:3000,http://localhost:3000").split(",")
  if x.strip()
]

# simulated latency before the revenue query
REVENUE_DELAY_SECONDS = float(os.getenv("REVENUE_DELAY_SECONDS", "3"))

CURRENCY = os.getenv("CURRENCY", "USD").strip().upper()
CURRENCY_LOCALE = os.getenv("CURRENCY_LOCALE", "en_US").strip()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "console").strip().lower()  # console|json
