"""
Кодирование полезной нагрузки блока.

Формат: "<версия>:<hex канонического UTF-8 JSON>", например "1:7b226f..."
"""
import json
from typing import Any

from star_registry.exceptions import DecodeError

PAYLOAD_VERSION = "1"
VERSION_SEPARATOR = ":"


def canonical_json(data: Any) -> str:
    """JSON с фиксированным порядком ключей, без пробелов"""
    return json.dumps(data, sort_keys=True, separators=(',', ':'), ensure_ascii=False)


def encode_payload(data: Any) -> str:
    """Кодирование данных блока для хранения"""
    raw = canonical_json(data).encode('utf-8')
    return f"{PAYLOAD_VERSION}{VERSION_SEPARATOR}{raw.hex()}"


def decode_payload(body: str) -> Any:
    """
    Декодирование данных блока

    Raises:
        DecodeError: неизвестная версия, битый hex, UTF-8 или JSON
    """
    if not isinstance(body, str):
        raise DecodeError(f"expected str, got {type(body).__name__}")

    version, sep, encoded = body.partition(VERSION_SEPARATOR)
    if not sep:
        raise DecodeError("missing encoding version")
    if version != PAYLOAD_VERSION:
        raise DecodeError(f"unsupported encoding version {version!r}")

    try:
        raw = bytes.fromhex(encoded)
    except ValueError as e:
        raise DecodeError(f"invalid hex: {e}") from e

    try:
        return json.loads(raw.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(f"invalid JSON document: {e}") from e
