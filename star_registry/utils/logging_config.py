# star_registry/utils/logging_config.py
"""
Конфигурация логирования для реестра звезд
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
import json
from datetime import datetime, UTC
from typing import Dict, Any, List

from star_registry.utils import config


class JSONFormatter(logging.Formatter):
    """Форматировщик логов в JSON"""

    def format(self, record: logging.LogRecord) -> str:
        log_record: Dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        # extra поля (event, height, owner, ...)
        for key, value in record.__dict__.items():
            if key not in log_record and not key.startswith('_'):
                log_record[key] = value

        return json.dumps(log_record, ensure_ascii=False, default=str)


class ColorFormatter(logging.Formatter):
    """Цветной форматировщик для консоли"""

    COLORS = {
        'DEBUG': '\033[36m',  # Cyan
        'INFO': '\033[32m',  # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',  # Red
        'CRITICAL': '\033[41m',  # Red background
        'RESET': '\033[0m',
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        reset = self.COLORS['RESET']

        log_time = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S')
        message = super().format(record)

        return f"{log_time} {color}{record.levelname:8s}{reset} [{record.name}] {message}"


def setup_logging():
    """
    Настройка логирования для приложения

    Консоль всегда, JSON-файлы с ротацией только если включен log_to_file.
    """
    settings = config.settings
    level = logging.DEBUG if settings.debug else logging.INFO

    logger = logging.getLogger()
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(ColorFormatter('%(message)s'))
    logger.addHandler(console_handler)

    if settings.log_to_file:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            filename=log_dir / "star_registry.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(JSONFormatter())
        logger.addHandler(file_handler)

        # Отказы и нарушения целостности отдельно
        error_handler = RotatingFileHandler(
            filename=log_dir / "errors.log",
            maxBytes=5 * 1024 * 1024,  # 5 MB
            backupCount=3,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.WARNING)
        error_handler.setFormatter(JSONFormatter())
        logger.addHandler(error_handler)

    logging.getLogger("uvicorn").setLevel(logging.WARNING)

    logger.info("Логирование настроено")

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Получение логгера с заданным именем

    Args:
        name: Имя логгера

    Returns:
        Настроенный логгер
    """
    return logging.getLogger(name)


class StructuredLogger:
    """
    Логгер для структурированного логирования
    """

    def __init__(self, name: str):
        self.logger = get_logger(name)

    def _log_with_context(self, level: int, msg: str, **kwargs):
        """Логирование с дополнительным контекстом"""
        self.logger.log(level, msg, extra=kwargs, stacklevel=3)

    def info(self, msg: str, **kwargs):
        self._log_with_context(logging.INFO, msg, **kwargs)

    def debug(self, msg: str, **kwargs):
        self._log_with_context(logging.DEBUG, msg, **kwargs)

    def warning(self, msg: str, **kwargs):
        self._log_with_context(logging.WARNING, msg, **kwargs)

    def error(self, msg: str, **kwargs):
        self._log_with_context(logging.ERROR, msg, **kwargs)

    def critical(self, msg: str, **kwargs):
        self._log_with_context(logging.CRITICAL, msg, **kwargs)

    def block_appended(self, height: int, block_hash: str, **kwargs):
        """Логирование добавления блока"""
        self.info(f"Блок добавлен в цепочку. Высота: {height}",
                  event="block_appended",
                  height=height,
                  block_hash=block_hash,
                  **kwargs)

    def star_registered(self, owner: str, height: int, **kwargs):
        """Логирование регистрации звезды"""
        self.info(f"Звезда зарегистрирована на {owner}",
                  event="star_registered",
                  owner=owner,
                  height=height,
                  **kwargs)

    def submission_rejected(self, owner: str, reason: str, **kwargs):
        """Логирование отклоненной подачи звезды"""
        self.warning(f"Подача звезды отклонена: {reason}",
                     event="submission_rejected",
                     owner=owner,
                     reason=reason,
                     **kwargs)

    def chain_validated(self, chain_height: int, errors: List[str], **kwargs):
        """Логирование результата проверки цепочки"""
        if errors:
            self.warning(f"Нарушена целостность цепочки: {len(errors)} ошибок",
                         event="chain_validated",
                         chain_height=chain_height,
                         is_valid=False,
                         errors=errors,
                         **kwargs)
        else:
            self.debug("Цепочка валидна",
                       event="chain_validated",
                       chain_height=chain_height,
                       is_valid=True,
                       **kwargs)
