"""Run the daily attendance reminder once.

For hosts that schedule with an external cron daemon instead of the in-process
scheduler, e.g. (crontab in Asia/Jakarta):

    CRON_TZ=Asia/Jakarta
    0 10 * * 1-5  cd /srv/school-portal && python scripts/send_attendance_reminder.py
"""

from __future__ import annotations

import importlib
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src" / "school_portal"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from config import get_settings_module

from school_portal.container import build_container
from school_portal.main import configure_logging


def main() -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(settings)
    result = container.reminder_job.run()
    print(json.dumps(result.as_dict(), ensure_ascii=False))
    # A failed run is already logged; the next scheduled tick is the retry.
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
