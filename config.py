import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    DB_ECHO = bool(data.get("DB_ECHO", False))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", True))

    # Studio policy: opening_hours, cancellation_window_hours, hold_minutes,
    # optional per-trainer overrides under "trainers"
    STUDIO_POLICY = data.get("STUDIO_POLICY", {}) or {}

    # Availability
    AVAILABILITY_SLOT_STRIDE_MINUTES = data.get("AVAILABILITY_SLOT_STRIDE_MINUTES", 30)
    MAX_AVAILABILITY_RANGE_DAYS = data.get("MAX_AVAILABILITY_RANGE_DAYS", 62)

    # Hold sweeper (optional, passive expiry covers correctness)
    HOLD_SWEEP_ENABLED = bool(data.get("HOLD_SWEEP_ENABLED", True))
    HOLD_SWEEP_INTERVAL_SECONDS = data.get("HOLD_SWEEP_INTERVAL_SECONDS", 60)
    HOLD_SWEEP_BATCH_SIZE = data.get("HOLD_SWEEP_BATCH_SIZE", 100)

    BOOKING_NOTIFICATION_WEBHOOK = data.get("BOOKING_NOTIFICATION_WEBHOOK", None)
