import os
from pathlib import Path
from zoneinfo import ZoneInfo

REDIS_HOST = os.environ.get("REDIS_HOST", "localhost")
REDIS_PORT = int(os.environ.get("REDIS_PORT", "6379"))

TIMEZONE = ZoneInfo(os.environ.get("TIMEZONE", "America/New_York"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

ACCESSORY_CONFIG_PATH = Path(os.environ.get("ACCESSORY_CONFIG_PATH", "accessory.json"))

HOME_ASSISTANT_URL = os.environ.get("HOME_ASSISTANT_URL", "").rstrip("/")
HOME_ASSISTANT_TOKEN = os.environ.get("HOME_ASSISTANT_TOKEN", "")
