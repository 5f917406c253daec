from __future__ import annotations

import asyncio
import logging
import signal

import mysql.connector
from dotenv import load_dotenv

from .container import Container, build_container
from .core.exceptions import DomainError
from .database.bootstrap import apply_schema
from .settings import get_settings_module, load_settings

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def create_runtime() -> Container:
    load_dotenv(override=False)
    settings = load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        database_url=getattr(settings, "DATABASE_URL", None),
        auto_close_interval=float(getattr(settings, "AUTO_CLOSE_INTERVAL_SECONDS", 60)),
        expiry_sweep_interval=float(getattr(settings, "EXPIRY_SWEEP_INTERVAL_SECONDS", 3600)),
    )

    db_config = container.db_config
    if getattr(settings, "DEBUG", False):
        target = f"{db_config.user}@{db_config.host}:{db_config.port}/{db_config.database}" if db_config else "disabled"
        logger.debug("[workshop-attendance] settings=%s db=%s", get_settings_module(), target)

    if db_config is None:
        logger.warning("DATABASE_URL not set: persistence disabled, writes will fail")
        return container

    if getattr(settings, "AUTO_INIT_DB", False):
        await apply_schema(db_config)

    if getattr(settings, "SEED_BREAK_WINDOWS", True):
        try:
            await container.break_service.ensure_defaults()
        except (DomainError, mysql.connector.Error) as exc:
            logger.warning("Failed to initialize break windows, continuing anyway: %s", exc)

    return container


async def serve() -> None:
    container = await create_runtime()
    stopped = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stopped.set)
        except NotImplementedError:
            # Windows event loops have no signal handlers; Ctrl+C still cancels asyncio.run
            pass

    container.scheduler.start()
    try:
        await stopped.wait()
    finally:
        await container.scheduler.stop()
        await container.data_access.reset()


def run() -> None:
    try:
        asyncio.run(serve())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
