from contextlib import asynccontextmanager
from fastapi import FastAPI
import asyncio
import logging

from star_registry.dependencies import get_ledger
from star_registry.utils import config
from star_registry.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan менеджер: логирование, проверка цепочки при запуске
    и периодический аудит целостности.
    """
    settings = config.settings

    # ========== STARTUP ==========
    setup_logging()
    logger.info("Запуск Star Registry...")

    ledger = app.dependency_overrides.get(get_ledger, get_ledger)()
    startup_errors = ledger.validate_chain()
    if startup_errors:
        logger.error(f"Цепочка повреждена при запуске: {startup_errors}")
    logger.info(f"Цепочка готова, высота: {ledger.get_chain_height()}")

    audit_task = None
    if settings.chain_audit_enabled and settings.chain_audit_interval > 0:
        audit_task = asyncio.create_task(_periodic_chain_audit(ledger, settings.chain_audit_interval))
        logger.info("Периодический аудит цепочки запущен")

    yield

    # ========== SHUTDOWN ==========
    logger.info("Остановка Star Registry...")

    if audit_task:
        audit_task.cancel()
        try:
            await audit_task
        except asyncio.CancelledError:
            logger.info("Задача аудита цепочки остановлена")


async def _periodic_chain_audit(ledger, interval: int):
    """Периодическая проверка целостности цепочки"""
    while True:
        try:
            await asyncio.sleep(interval)
            # validate_chain сам логирует найденные нарушения
            ledger.validate_chain()

        except asyncio.CancelledError:
            logger.info("Задача аудита цепочки остановлена")
            break
        except Exception as e:
            logger.error(f"Ошибка в периодическом аудите цепочки: {e}")
