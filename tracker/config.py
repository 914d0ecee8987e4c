# tracker/config.py
import os
from dotenv import load_dotenv

load_dotenv()

MAX_PLAN_MONTHS = int(os.getenv("MAX_PLAN_MONTHS", "240"))  # 20 years
DEFAULT_BUDGET_DOLLARS = float(os.getenv("DEFAULT_BUDGET_DOLLARS", "500"))
DEFAULT_PROVINCE = os.getenv("DEFAULT_PROVINCE", "ON")
TAX_YEAR = os.getenv("TAX_YEAR", "2025")

RATE_LIMIT_MAX_ATTEMPTS = int(os.getenv("RATE_LIMIT_MAX_ATTEMPTS", "10"))
RATE_LIMIT_WINDOW_SECONDS = float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "900"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
