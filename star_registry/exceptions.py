"""
Ошибки ядра реестра звезд
"""
from dataclasses import dataclass
from typing import Optional


class LedgerError(Exception):
    """Базовая ошибка реестра"""


class NotFoundError(LedgerError):
    """Блок с указанной высотой или хэшем отсутствует"""


class ValidationError(LedgerError):
    """Некорректное сообщение-вызов или входные данные"""


class ExpiredSubmissionError(LedgerError):
    """Окно подачи подписанного сообщения истекло"""

    def __init__(self, elapsed: int, window: int):
        self.elapsed = elapsed
        self.window = window
        super().__init__(
            f"The submission window of {window} seconds has elapsed "
            f"({elapsed}s since the challenge). Request a new message."
        )


class SignatureVerificationError(LedgerError):
    """Подпись не соответствует адресу и сообщению"""


class DecodeError(LedgerError):
    """Данные блока не удалось декодировать"""

    def __init__(self, reason: str, height: Optional[int] = None):
        self.reason = reason
        self.height = height
        if height is None:
            super().__init__(f"Cannot decode block body: {reason}")
        else:
            super().__init__(f"Cannot decode body of block {height}: {reason}")


# Виды нарушений целостности
TAMPERED_BLOCK = "tampered"
BROKEN_LINK = "broken_link"


@dataclass(frozen=True)
class ChainIntegrityError:
    """
    Нарушение целостности цепочки.

    Не выбрасывается: validate_chain возвращает такие записи как данные.
    """
    height: int
    kind: str
    description: str

    def __str__(self) -> str:
        return self.description
