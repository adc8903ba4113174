"""
Файл для хранения глобальных зависимостей и предотвращения циклических импортов.
"""

from star_registry.services.ledger_service import Ledger

# Единственный экземпляр цепочки на процесс
ledger = Ledger()


# Функции для зависимостей (для FastAPI Depends)
def get_ledger() -> Ledger:
    return ledger


__all__ = [
    "ledger",
    "get_ledger",
]
