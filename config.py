import logging
import os
import sys
from logging import StreamHandler

import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./guests.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    QR_ENCRYPTION_KEY = data.get("QR_ENCRYPTION_KEY", "dev-qr-key-change-in-production")
    QR_PREFIX = data.get("QR_PREFIX", "dmc-checkin:")
    DEFAULT_RSVP_ACCESS = data.get("DEFAULT_RSVP_ACCESS", "open")
    PUBLIC_SITE_URL = data.get("PUBLIC_SITE_URL", "http://localhost:8000")
    WEBHOOK_URLS = data.get("WEBHOOK_URLS", {})
    DELIVERY_TIMEOUT_SECONDS = float(data.get("DELIVERY_TIMEOUT_SECONDS", 10))
    DETECT_SCHEMA_CAPABILITIES = bool(data.get("DETECT_SCHEMA_CAPABILITIES", True))
    CREATE_TABLES_ON_STARTUP = bool(data.get("CREATE_TABLES_ON_STARTUP", True))


def setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[StreamHandler(sys.stdout)],
    )
