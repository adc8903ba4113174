"""
Подпись и проверка сообщений в формате кошельков Bitcoin
("Bitcoin Signed Message", как в Electrum / Bitcoin Core / Electron Cash).

Подпись: base64 от 65 байт = заголовок + r + s.
Заголовок:
    27..30 - P2PKH, несжатый ключ
    31..34 - P2PKH, сжатый ключ
    35..38 - P2SH-P2WPKH
Младшие два бита (заголовок - 27) - recovery id.
"""
import base64
import binascii
import hashlib
from typing import List, Tuple, Union

from ecdsa import SigningKey, VerifyingKey, SECP256k1
from ecdsa.util import sigencode_string

from star_registry.exceptions import SignatureVerificationError
from star_registry.utils.address import decode_address, hash160, p2wpkh_script_hash
from star_registry.utils.network_config import P2KH, P2SH
from star_registry.utils.logging_config import StructuredLogger

logger = StructuredLogger(__name__)

MESSAGE_MAGIC = b"\x18Bitcoin Signed Message:\n"
SIGNATURE_LENGTH = 65

HEADER_UNCOMPRESSED = 27
HEADER_COMPRESSED = 31
HEADER_P2SH_P2WPKH = 35
HEADER_MAX = 38


def encode_varint(n: int) -> bytes:
    """CompactSize из протокола Bitcoin"""
    if n < 0xfd:
        return bytes([n])
    if n <= 0xffff:
        return b"\xfd" + n.to_bytes(2, 'little')
    if n <= 0xffffffff:
        return b"\xfe" + n.to_bytes(4, 'little')
    return b"\xff" + n.to_bytes(8, 'little')


def magic_hash(message: str) -> bytes:
    """Двойной SHA-256 сообщения с префиксом MESSAGE_MAGIC"""
    data = message.encode('utf-8')
    payload = MESSAGE_MAGIC + encode_varint(len(data)) + data
    return hashlib.sha256(hashlib.sha256(payload).digest()).digest()


def parse_signature(signature: str) -> Tuple[int, bool, bool, bytes]:
    """
    Разбор compact-подписи

    Returns:
        (recovery id, сжатый ключ, segwit, r||s)

    Raises:
        SignatureVerificationError: не base64, неверная длина или заголовок
    """
    try:
        raw = base64.b64decode(signature, validate=True)
    except (binascii.Error, ValueError) as e:
        raise SignatureVerificationError(f"Signature is not valid base64: {e}") from e

    if len(raw) != SIGNATURE_LENGTH:
        raise SignatureVerificationError(f"Invalid signature length: {len(raw)}")

    header = raw[0]
    if header < HEADER_UNCOMPRESSED or header > HEADER_MAX:
        raise SignatureVerificationError(f"Invalid signature header: {header}")

    recovery_id = (header - HEADER_UNCOMPRESSED) & 3
    compressed = header >= HEADER_COMPRESSED
    segwit = header >= HEADER_P2SH_P2WPKH

    return recovery_id, compressed, segwit, raw[1:]


def recover_public_keys(rs: bytes, digest: bytes) -> List[VerifyingKey]:
    """Открытые ключи, для которых подпись r||s над digest валидна"""
    try:
        return VerifyingKey.from_public_key_recovery_with_digest(
            rs, digest, SECP256k1, hashfunc=hashlib.sha256
        )
    except Exception as e:
        # r/s вне кривой: библиотека бросает разные типы ошибок
        raise SignatureVerificationError(f"Cannot recover public key: {e}") from e


def verify_message(message: str, address: str, signature: str) -> bool:
    """
    Проверка подписи сообщения адресом

    Returns:
        True если подпись сделана ключом, которому принадлежит адрес

    Raises:
        SignatureVerificationError: адрес или подпись не разбираются
    """
    try:
        address_info = decode_address(address)
    except ValueError as e:
        raise SignatureVerificationError(f"Unsupported address {address!r}: {e}") from e

    _, compressed, segwit, rs = parse_signature(signature)
    expected_type = P2SH if segwit else P2KH
    if address_info.address_type != expected_type:
        logger.debug(
            "Тип адреса не соответствует заголовку подписи",
            event="signature_address_type_mismatch",
            address_type=address_info.address_type,
            expected_type=expected_type
        )
        return False

    encoding = "compressed" if compressed else "uncompressed"
    for verifying_key in recover_public_keys(rs, magic_hash(message)):
        key_hash = hash160(verifying_key.to_string(encoding))
        if segwit:
            key_hash = p2wpkh_script_hash(key_hash)
        if key_hash == address_info.hash160:
            return True

    return False


def sign_message(private_key: Union[SigningKey, bytes], message: str,
                 compressed: bool = True, segwit: bool = False) -> str:
    """
    Подпись сообщения закрытым ключом (детерминированная, RFC 6979)

    Args:
        private_key: SigningKey или 32 байта секрета
        message: текст сообщения
        compressed: подпись для сжатого ключа
        segwit: заголовок P2SH-P2WPKH
    """
    if isinstance(private_key, bytes):
        private_key = SigningKey.from_string(private_key, curve=SECP256k1)
    if segwit and not compressed:
        raise ValueError("P2SH-P2WPKH requires a compressed public key")

    digest = magic_hash(message)
    rs = private_key.sign_digest_deterministic(digest, hashfunc=hashlib.sha256, sigencode=sigencode_string)

    public_key = private_key.get_verifying_key().to_string()
    candidates = recover_public_keys(rs, digest)
    recovery_id = next(i for i, key in enumerate(candidates) if key.to_string() == public_key)

    if segwit:
        base = HEADER_P2SH_P2WPKH
    elif compressed:
        base = HEADER_COMPRESSED
    else:
        base = HEADER_UNCOMPRESSED

    return base64.b64encode(bytes([base + recovery_id]) + rs).decode('ascii')
