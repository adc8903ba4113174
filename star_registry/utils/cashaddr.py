"""
CashAddr для адресов Bitcoin Cash
Спецификация: https://github.com/bitcoincashorg/bitcoincash.org/blob/master/spec/cashaddr.md
"""
from typing import List, Tuple

from star_registry.utils.network_config import NETWORK_CONFIGS, P2KH, P2SH

CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
GENERATOR = [0x98f2bc8e61, 0x79b76d99e2, 0xf33e5fb3c4, 0xae2eabe2a8, 0x1e4f43e470]
CHECKSUM_LENGTH = 8

# Тип адреса в version byte
ADDRESS_TYPES = {
    P2KH: 0,
    P2SH: 1,
}


class CashAddr:
    """Кодирование и декодирование CashAddr"""

    @staticmethod
    def polymod(values: List[int]) -> int:
        """BCH-код контрольной суммы (0 для валидного адреса)"""
        chk = 1
        for value in values:
            top = chk >> 35
            chk = ((chk & 0x07ffffffff) << 5) ^ value
            for i in range(5):
                if (top >> i) & 1:
                    chk ^= GENERATOR[i]
        return chk ^ 1

    @staticmethod
    def expand_prefix(prefix: str) -> List[int]:
        return [ord(x) & 0x1f for x in prefix] + [0]

    @staticmethod
    def checksum(prefix: str, payload: List[int]) -> List[int]:
        poly = CashAddr.polymod(CashAddr.expand_prefix(prefix) + payload + [0] * CHECKSUM_LENGTH)
        return [(poly >> (5 * (7 - i))) & 0x1f for i in range(CHECKSUM_LENGTH)]

    @staticmethod
    def convert_bits(data: List[int], from_bits: int, to_bits: int, pad: bool = True) -> List[int]:
        """Перепаковка между 8- и 5-битными группами"""
        acc = 0
        bits = 0
        ret = []
        maxv = (1 << to_bits) - 1
        max_acc = (1 << (from_bits + to_bits - 1)) - 1

        for value in data:
            if value < 0 or (value >> from_bits):
                raise ValueError(f"Invalid value: {value}")
            acc = ((acc << from_bits) | value) & max_acc
            bits += from_bits
            while bits >= to_bits:
                bits -= to_bits
                ret.append((acc >> bits) & maxv)

        if pad:
            if bits:
                ret.append((acc << (to_bits - bits)) & maxv)
        elif bits >= from_bits or ((acc << (to_bits - bits)) & maxv):
            raise ValueError("Invalid padding")

        return ret

    @staticmethod
    def encode(prefix: str, address_type: str, hash_bytes: bytes) -> str:
        """hash160 -> CashAddr"""
        if address_type not in ADDRESS_TYPES:
            raise ValueError(f"Unsupported address type: {address_type}")
        if len(hash_bytes) != 20:
            raise ValueError(f"Invalid hash length: {len(hash_bytes)}")

        # Тип в старших битах, размер хэша 0 (160 бит)
        version_byte = ADDRESS_TYPES[address_type] << 3
        payload = CashAddr.convert_bits([version_byte] + list(hash_bytes), 8, 5, True)
        combined = payload + CashAddr.checksum(prefix, payload)

        return prefix + ':' + ''.join(CHARSET[v] for v in combined)

    @staticmethod
    def decode(address: str) -> Tuple[str, str, bytes]:
        """
        CashAddr -> (префикс, тип адреса, hash160)

        Raises:
            ValueError: неизвестный префикс, символ, тип или неверная контрольная сумма
        """
        if address.lower() != address and address.upper() != address:
            raise ValueError(f"Mixed case in address: {address}")
        address = address.lower()

        prefix, sep, encoded = address.partition(':')
        if not sep or not encoded:
            raise ValueError(f"Invalid CashAddr format: {address}")

        known_prefixes = [config['address_prefix'] for config in NETWORK_CONFIGS.values()]
        if prefix not in known_prefixes:
            raise ValueError(f"Unknown prefix: {prefix}")

        values = []
        for char in encoded:
            if char not in CHARSET:
                raise ValueError(f"Invalid character in address: {char}")
            values.append(CHARSET.index(char))

        if len(values) <= CHECKSUM_LENGTH:
            raise ValueError(f"Address too short: {address}")
        if CashAddr.polymod(CashAddr.expand_prefix(prefix) + values) != 0:
            raise ValueError(f"Invalid checksum for address: {address}")

        decoded = CashAddr.convert_bits(values[:-CHECKSUM_LENGTH], 5, 8, False)
        if not decoded:
            raise ValueError("Empty payload")

        version_byte = decoded[0]
        type_bits = (version_byte >> 3) & 0x1f
        hash_size = version_byte & 0x07
        hash_bytes = bytes(decoded[1:])

        if hash_size != 0 or len(hash_bytes) != 20:
            raise ValueError(f"Invalid hash size: {len(hash_bytes)}")

        for name, bits in ADDRESS_TYPES.items():
            if bits == type_bits:
                return prefix, name, hash_bytes

        raise ValueError(f"Unsupported address type: {type_bits}")
