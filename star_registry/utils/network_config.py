"""
Параметры адресов для сетей Bitcoin / Bitcoin Cash
"""
from typing import Dict, Any, Optional, Tuple

# Версии legacy (base58) адресов и префиксы CashAddr
NETWORK_CONFIGS: Dict[str, Dict[str, Any]] = {
    'mainnet': {
        'name': 'Mainnet',
        'address_prefix': 'bitcoincash',
        'pubkey_hash': 0x00,
        'script_hash': 0x05,
    },
    'testnet': {
        'name': 'Testnet',
        'address_prefix': 'bchtest',
        'pubkey_hash': 0x6f,
        'script_hash': 0xc4,
    },
    'regtest': {
        'name': 'Regtest',
        'address_prefix': 'bchreg',
        # regtest использует testnet версии
        'pubkey_hash': 0x6f,
        'script_hash': 0xc4,
    },
}

P2KH = 'P2KH'
P2SH = 'P2SH'


def network_for_prefix(prefix: str) -> Optional[str]:
    """Сеть по префиксу CashAddr"""
    for network, config in NETWORK_CONFIGS.items():
        if config['address_prefix'] == prefix:
            return network
    return None


def network_for_version(version: int) -> Optional[Tuple[str, str]]:
    """(сеть, тип адреса) по версии legacy адреса"""
    # regtest неотличим от testnet, поэтому берем первую подходящую сеть
    for network, config in NETWORK_CONFIGS.items():
        if config['pubkey_hash'] == version:
            return network, P2KH
        if config['script_hash'] == version:
            return network, P2SH
    return None


def legacy_version(network: str, address_type: str) -> int:
    """Версия legacy адреса для сети и типа"""
    if network not in NETWORK_CONFIGS:
        raise ValueError(f"Unknown network: {network}")
    config = NETWORK_CONFIGS[network]
    return config['pubkey_hash'] if address_type == P2KH else config['script_hash']
