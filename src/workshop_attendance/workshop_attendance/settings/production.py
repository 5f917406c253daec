import os

# No default: without DATABASE_URL persistence is disabled.
DATABASE_URL = os.getenv("DATABASE_URL", "")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
SEED_BREAK_WINDOWS = bool(int(os.getenv("SEED_BREAK_WINDOWS", "1")))

AUTO_CLOSE_INTERVAL_SECONDS = float(os.getenv("AUTO_CLOSE_INTERVAL_SECONDS", "60"))
EXPIRY_SWEEP_INTERVAL_SECONDS = float(os.getenv("EXPIRY_SWEEP_INTERVAL_SECONDS", "3600"))
