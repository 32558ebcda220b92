# storefront/utils/settings.py
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


API_BASE_URL = os.getenv("STOREFRONT_API_URL", "http://localhost:8888")
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", 10))
# 1 = brak ponowien, bledy trafiaja od razu do widoku
HTTP_RETRY_ATTEMPTS = int(os.getenv("HTTP_RETRY_ATTEMPTS", 1))
SESSION_FILE = Path(os.getenv("SESSION_FILE", str(Path.home() / ".storefront" / "session.json")))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CURRENCY_LOCALE = os.getenv("CURRENCY_LOCALE", "id_ID")
RECENT_ORDERS_LIMIT = int(os.getenv("RECENT_ORDERS_LIMIT", 5))
LOCK_TIMEOUT_SECONDS = float(os.getenv("LOCK_TIMEOUT_SECONDS", 30))
ENFORCE_STATUS_TRANSITIONS = _flag("ENFORCE_STATUS_TRANSITIONS", "true")
CUSTOMER_CAN_MARK_PAID = _flag("CUSTOMER_CAN_MARK_PAID", "true")
