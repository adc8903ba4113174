"""
Конфигурация для тестов
"""
import pytest
import sys
import os

from ecdsa import SigningKey, SECP256k1

# Добавляем корень проекта в sys.path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from star_registry.utils.config import Settings  # noqa: E402

START_TIME = 1_700_000_000


class FakeClock:
    """Управляемые часы сервера"""

    def __init__(self, now: int = START_TIME):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int):
        self.now += seconds


@pytest.fixture(autouse=True)
def test_settings():
    """Настройки для тестов: без файловых логов и фонового аудита"""
    import star_registry.utils.config as config_module

    original_settings = config_module.settings

    settings = Settings(
        submission_window_seconds=300,
        challenge_tag="starRegistry",
        genesis_data="Genesis Block",
        chain_audit_enabled=False,
        log_to_file=False,
        debug=True,
    )
    config_module.settings = settings

    yield settings

    config_module.settings = original_settings


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ledger(test_settings, clock):
    """Свежая цепочка с управляемыми часами"""
    from star_registry.services.ledger_service import Ledger
    return Ledger(settings=test_settings, clock=clock)


@pytest.fixture
def signing_key():
    """Детерминированный ключ кошелька A"""
    return SigningKey.from_secret_exponent(0xA11CE, curve=SECP256k1)


@pytest.fixture
def other_signing_key():
    """Детерминированный ключ кошелька B"""
    return SigningKey.from_secret_exponent(0xB0B, curve=SECP256k1)


@pytest.fixture
def wallet_address(signing_key):
    from star_registry.utils.address import address_from_public_key
    return address_from_public_key(signing_key.get_verifying_key())


@pytest.fixture
def other_wallet_address(other_signing_key):
    from star_registry.utils.address import address_from_public_key
    return address_from_public_key(other_signing_key.get_verifying_key())


@pytest.fixture
def sample_star():
    """Пример звезды"""
    return {
        "dec": "68° 52' 56.9",
        "ra": "16h 29m 1.0s",
        "story": "Found star using https://www.google.com/sky/"
    }
