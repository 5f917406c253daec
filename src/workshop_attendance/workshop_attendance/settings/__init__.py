import importlib
import os


def get_settings_module() -> str:
    # APP_ENV selects the settings module, 'development' by default
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "production"

    if env in {"test", "testing"}:
        return "testing"

    return "development"


def load_settings():
    return importlib.import_module(f".{get_settings_module()}", __name__)
