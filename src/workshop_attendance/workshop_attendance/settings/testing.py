import os

DATABASE_URL = os.getenv("DATABASE_URL", "")

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
SEED_BREAK_WINDOWS = bool(int(os.getenv("SEED_BREAK_WINDOWS", "0")))

AUTO_CLOSE_INTERVAL_SECONDS = 60.0
EXPIRY_SWEEP_INTERVAL_SECONDS = 3600.0
