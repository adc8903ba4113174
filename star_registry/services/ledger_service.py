"""
Сервис цепочки блоков реестра звезд
"""
import asyncio
from datetime import datetime, UTC
from typing import Any, Callable, List, Optional, Tuple

from star_registry.crypto.message import verify_message
from star_registry.exceptions import (
    ChainIntegrityError,
    DecodeError,
    ExpiredSubmissionError,
    NotFoundError,
    SignatureVerificationError,
    ValidationError,
    TAMPERED_BLOCK,
    BROKEN_LINK,
)
from star_registry.models.block import Block
from star_registry.utils import config
from star_registry.utils.logging_config import StructuredLogger

logger = StructuredLogger(__name__)


def utc_timestamp() -> int:
    """Текущее время сервера в секундах"""
    return int(datetime.now(UTC).timestamp())


class Ledger:
    """
    Цепочка блоков в памяти процесса.

    Единственная точка изменения цепочки - append_block, вызовы которой
    сериализуются через asyncio.Lock. Чтение синхронное.
    """

    def __init__(self, settings=None, clock: Optional[Callable[[], int]] = None):
        self.settings = settings or config.settings
        self.clock = clock or utc_timestamp

        self._chain: List[Block] = []
        self.height = -1
        self._append_lock = asyncio.Lock()

        self._initialize_chain()

        logger.info(
            "Ledger инициализирован",
            event="ledger_initialized",
            chain_height=self.height,
            submission_window=self.settings.submission_window_seconds
        )

    def _initialize_chain(self):
        """Создание genesis блока для пустой цепочки"""
        if self.height == -1:
            self._append(Block(data=self.settings.genesis_data))

    def _now(self) -> int:
        return int(self.clock())

    # ========== ДОБАВЛЕНИЕ БЛОКОВ ==========

    def _append(self, block: Block) -> Block:
        """
        Заполнение полей блока и добавление в цепочку.

        Цепочка и высота меняются только после того, как блок полностью собран.
        """
        height = self.height
        if height >= 0:
            block.previous_hash = self._chain[height].hash
        block.height = height + 1
        block.time = self._now()
        block.hash = block.compute_hash()

        self._chain.append(block)
        self.height = block.height

        logger.block_appended(block.height, block.hash, previous_hash=block.previous_hash)
        return block

    async def append_block(self, data: Any) -> Block:
        """Добавление блока с данными data"""
        block = Block(data=data)
        async with self._append_lock:
            return self._append(block)

    # ========== ПРОТОКОЛ ПОДАЧИ ЗВЕЗД ==========

    def request_ownership_challenge(self, address: str) -> str:
        """
        Сообщение, которое владелец адреса должен подписать кошельком

        Формат: "<address>:<unix seconds>:starRegistry"
        """
        if not address:
            raise ValidationError("Wallet address is required")

        delimiter = self.settings.message_delimiter
        return f"{address}{delimiter}{self._now()}{delimiter}{self.settings.challenge_tag}"

    def parse_challenge(self, message: str) -> Tuple[str, int]:
        """
        Разбор сообщения-вызова

        Returns:
            (адрес, время выдачи)

        Raises:
            ValidationError: сообщение не в формате request_ownership_challenge
        """
        # Справа налево: CashAddr адрес сам содержит разделитель
        parts = message.rsplit(self.settings.message_delimiter, 2) if message else []
        if len(parts) != 3:
            raise ValidationError(f"Malformed ownership message: {message!r}")

        address, raw_time, tag = parts
        if tag != self.settings.challenge_tag:
            raise ValidationError(f"Unexpected message tag: {tag!r}")

        if not (raw_time.isascii() and raw_time.isdigit()):
            raise ValidationError(f"Message timestamp is not an integer: {raw_time!r}")

        return address, int(raw_time)

    async def submit_star(self, address: str, message: str, signature: str, star: Any) -> Block:
        """
        Регистрация звезды за владельцем адреса

        1. Разбор времени из сообщения
        2. Проверка окна подачи по времени сервера
        3. Проверка подписи сообщения адресом
        4. Добавление блока {"owner": address, "star": star}

        Raises:
            ValidationError, ExpiredSubmissionError, SignatureVerificationError
        """
        try:
            message_address, message_time = self.parse_challenge(message)
            if message_address != address:
                raise ValidationError("Message was issued for a different address")

            elapsed = self._now() - message_time
            if elapsed < 0:
                raise ValidationError("Message timestamp is in the future")

            window = self.settings.submission_window_seconds
            if elapsed >= window:
                raise ExpiredSubmissionError(elapsed, window)

            if not verify_message(message, address, signature):
                raise SignatureVerificationError("Signature does not match address and message")

        except (ValidationError, ExpiredSubmissionError, SignatureVerificationError) as e:
            logger.submission_rejected(address, str(e), error_type=type(e).__name__)
            raise

        block = await self.append_block({"owner": address, "star": star})
        logger.star_registered(address, block.height)
        return block

    # ========== ЗАПРОСЫ ==========

    @property
    def chain(self) -> Tuple[Block, ...]:
        return tuple(self._chain)

    def get_chain_height(self) -> int:
        return self.height

    def get_block_by_height(self, height: int) -> Block:
        if not isinstance(height, int) or not 0 <= height <= self.height:
            raise NotFoundError(f"Block with height {height} not found")
        return self._chain[height]

    def get_block_by_hash(self, block_hash: str) -> Block:
        for block in self._chain:
            if block.hash == block_hash:
                return block
        raise NotFoundError(f"Block with hash {block_hash} not found")

    def get_stars_by_owner(self, address: str) -> List[Any]:
        """
        Звезды владельца в порядке добавления (без genesis).

        Поврежденный блок прерывает весь запрос с DecodeError.
        """
        stars = []
        for block in self._chain[1:]:
            try:
                data = block.decode_payload()
            except DecodeError as e:
                raise DecodeError(e.reason, height=block.height) from e

            if isinstance(data, dict) and data.get("owner") == address:
                stars.append(data)

        return stars

    # ========== ПРОВЕРКА ЦЕПОЧКИ ==========

    def find_integrity_errors(self) -> List[ChainIntegrityError]:
        """Все нарушения целостности за один проход"""
        errors = []
        chain = self.chain

        for index, block in enumerate(chain):
            try:
                intact = block.validate()
            except (TypeError, ValueError):
                # Поле заменено значением, которое не кодируется в JSON
                intact = False

            if not intact:
                errors.append(ChainIntegrityError(
                    height=index,
                    kind=TAMPERED_BLOCK,
                    description=f"Block of height {index} data has been changed."
                ))

            if index > 0 and block.previous_hash != chain[index - 1].hash:
                errors.append(ChainIntegrityError(
                    height=index,
                    kind=BROKEN_LINK,
                    description=(
                        f"Block of height {index} previousHash does not match "
                        f"Block of height {index - 1} hash."
                    )
                ))

        return errors

    def validate_chain(self) -> List[str]:
        """Описания нарушений целостности; пустой список - цепочка валидна"""
        errors = [str(error) for error in self.find_integrity_errors()]
        logger.chain_validated(self.height, errors)
        return errors
