"""Settings shared by every environment; values come from the process environment (.env)."""

import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# "firestore" (default, the managed document store) or "mysql"
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "firestore").lower()

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_portal"),
}

# Path to the service-account JSON, or the JSON itself. Empty = application default credentials.
FIREBASE_CREDENTIALS = os.getenv("FIREBASE_CREDENTIALS") or None
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID") or None

# Daily attendance reminder. The defaults are the agreed schedule; keep the zone a named region.
REMINDER_CRON = os.getenv("REMINDER_CRON", "0 10 * * 1-5")
REMINDER_TIMEZONE = os.getenv("REMINDER_TIMEZONE", "Asia/Jakarta")
REMINDER_TITLE = "Pengingat Kehadiran Harian"
REMINDER_BODY = (
    "Anda belum mencatat kehadiran untuk hari ini. "
    "Mohon segera catat kehadiran Anda di aplikasi SiAP Smapna."
)

# Public HTTPS address of the app; when set, clicking the notification opens it.
APP_BASE_URL = os.getenv("APP_BASE_URL", "")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
