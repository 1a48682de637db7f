"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

LOGIN_PATH = "/login"
ADMIN_PREFIX = "/admin"
STAFF_PREFIX = "/staff"
ADMIN_LANDING = ADMIN_PREFIX
STAFF_LANDING = STAFF_PREFIX

# Fixed external contract of the daily reminder trigger.
REMINDER_CRON = "0 10 * * 1-5"
REMINDER_TIMEZONE = "Asia/Jakarta"
REMINDER_TITLE = "Pengingat Kehadiran Harian"
REMINDER_BODY = (
    "Anda belum mencatat kehadiran untuk hari ini. "
    "Mohon segera catat kehadiran Anda di aplikasi SiAP Smapna."
)

# FCM rejects multicast messages with more tokens than this.
FCM_MULTICAST_LIMIT = 500

MAX_ATTENDANCE_NOTES = 300
DEFAULT_DISPLAY_NAME = "Guru"
