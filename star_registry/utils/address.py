"""
Утилиты для работы с адресами кошельков (legacy base58 и CashAddr)
"""
import hashlib
from dataclasses import dataclass

import base58
from ecdsa import VerifyingKey

from star_registry.utils.cashaddr import CashAddr
from star_registry.utils.network_config import (
    NETWORK_CONFIGS, P2KH, P2SH, network_for_prefix, network_for_version, legacy_version
)

FORMAT_LEGACY = 'legacy'
FORMAT_CASHADDR = 'cashaddr'

# OP_0 PUSH20: redeem script для P2SH-P2WPKH
P2WPKH_REDEEM_PREFIX = b"\x00\x14"


@dataclass(frozen=True)
class AddressInfo:
    """Разобранный адрес"""
    network: str
    address_type: str  # P2KH / P2SH
    hash160: bytes
    fmt: str


def hash160(data: bytes) -> bytes:
    """RIPEMD160(SHA256(data))"""
    return hashlib.new('ripemd160', hashlib.sha256(data).digest()).digest()


def p2wpkh_script_hash(pubkey_hash: bytes) -> bytes:
    """hash160 redeem script'а P2SH-P2WPKH"""
    return hash160(P2WPKH_REDEEM_PREFIX + pubkey_hash)


def decode_address(address: str) -> AddressInfo:
    """
    Разбор адреса в любом поддерживаемом формате

    Raises:
        ValueError: пустой, неизвестный или поврежденный адрес
    """
    if not address:
        raise ValueError("Empty address")

    if ':' in address:
        prefix, address_type, hash_bytes = CashAddr.decode(address)
        return AddressInfo(network_for_prefix(prefix), address_type, hash_bytes, FORMAT_CASHADDR)

    decoded = base58.b58decode_check(address)
    if len(decoded) != 21:  # 1 byte version + 20 bytes hash
        raise ValueError(f"Invalid legacy address length: {len(decoded)}")

    version_info = network_for_version(decoded[0])
    if version_info is None:
        raise ValueError(f"Unknown legacy address version: {decoded[0]:#04x}")

    network, address_type = version_info
    return AddressInfo(network, address_type, decoded[1:], FORMAT_LEGACY)


def encode_address(hash_bytes: bytes, network: str = 'mainnet', address_type: str = P2KH,
                   fmt: str = FORMAT_LEGACY) -> str:
    """hash160 -> адрес в нужном формате"""
    if fmt == FORMAT_CASHADDR:
        return CashAddr.encode(NETWORK_CONFIGS[network]['address_prefix'], address_type, hash_bytes)

    version = legacy_version(network, address_type)
    return base58.b58encode_check(bytes([version]) + hash_bytes).decode('utf-8')


def address_from_public_key(verifying_key: VerifyingKey, network: str = 'mainnet', compressed: bool = True,
                            fmt: str = FORMAT_LEGACY, segwit: bool = False) -> str:
    """
    Адрес для открытого ключа secp256k1

    Args:
        verifying_key: открытый ключ
        network: mainnet / testnet / regtest
        compressed: сжатая сериализация ключа
        fmt: legacy или cashaddr
        segwit: P2SH-P2WPKH вместо P2PKH (только для сжатых ключей)
    """
    encoding = "compressed" if compressed else "uncompressed"
    pubkey_hash = hash160(verifying_key.to_string(encoding))

    if segwit:
        if not compressed:
            raise ValueError("P2SH-P2WPKH requires a compressed public key")
        return encode_address(p2wpkh_script_hash(pubkey_hash), network, P2SH, fmt)

    return encode_address(pubkey_hash, network, P2KH, fmt)


def convert_address(address: str, fmt: str) -> str:
    """Перевод адреса между legacy и CashAddr"""
    info = decode_address(address)
    if info.fmt == fmt:
        return address
    return encode_address(info.hash160, info.network, info.address_type, fmt)
