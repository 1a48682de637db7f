from .config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

ENABLE_SCHEDULER = False
AUTO_INIT_DB = False
AUTO_SEED_DB = False
