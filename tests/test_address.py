"""
Тесты для адресов: legacy base58 и CashAddr
"""
import hashlib

import pytest
from ecdsa import SigningKey, SECP256k1

from star_registry.utils.address import (
    AddressInfo,
    address_from_public_key,
    convert_address,
    decode_address,
    encode_address,
    FORMAT_CASHADDR,
    FORMAT_LEGACY,
)
from star_registry.utils.cashaddr import CashAddr, CHARSET
from star_registry.utils.network_config import P2KH, P2SH

# Примеры из спецификации CashAddr
LEGACY_P2PKH = "1BpEi6DfDAUFd7GtittLSdBeYJvcoaVggu"
CASHADDR_P2PKH = "bitcoincash:qpm2qsznhks23z7629mms6s4cwef74vcwvy22gdx6a"
LEGACY_P2SH = "3CWFddi6m4ndiGyKqzYvsFYagqDLPVMTzC"
CASHADDR_P2SH = "bitcoincash:ppm2qsznhks23z7629mms6s4cwef74vcwvn0h829pq"


class TestCashAddr:
    """Низкоуровневые тесты CashAddr"""

    def test_polymod_of_valid_address_is_zero(self):
        prefix, encoded = CASHADDR_P2PKH.split(':')
        values = [CHARSET.index(c) for c in encoded]

        assert CashAddr.polymod(CashAddr.expand_prefix(prefix) + values) == 0

        wrong = values[:-1] + [(values[-1] + 1) % 32]
        assert CashAddr.polymod(CashAddr.expand_prefix(prefix) + wrong) != 0

    def test_decode_known_addresses(self):
        prefix, address_type, hash_bytes = CashAddr.decode(CASHADDR_P2PKH)
        assert prefix == 'bitcoincash'
        assert address_type == P2KH
        assert len(hash_bytes) == 20

        _, p2sh_type, p2sh_hash = CashAddr.decode(CASHADDR_P2SH)
        assert p2sh_type == P2SH
        assert p2sh_hash == hash_bytes

    def test_encode_matches_known_address(self):
        _, _, hash_bytes = CashAddr.decode(CASHADDR_P2PKH)
        assert CashAddr.encode('bitcoincash', P2KH, hash_bytes) == CASHADDR_P2PKH

    def test_uppercase_is_accepted(self):
        assert CashAddr.decode(CASHADDR_P2PKH.upper())[2] == CashAddr.decode(CASHADDR_P2PKH)[2]

    @pytest.mark.parametrize("address", [
        "bitcoincash:invalid",
        "unknown:qpm2qsznhks23z7629mms6s4cwef74vcwvy22gdx6a",
        "bitcoincash:qpm2qsznhks23z7629mms6s4cwef74vcwvy22gdx6q",  # checksum
        "bitcoincash:",
        "BitcoinCash:qpm2qsznhks23z7629mms6s4cwef74vcwvy22gdx6a",  # смешанный регистр
    ])
    def test_decode_invalid(self, address):
        with pytest.raises(ValueError):
            CashAddr.decode(address)

    def test_encode_invalid_hash_length(self):
        with pytest.raises(ValueError):
            CashAddr.encode('bitcoincash', P2KH, b"\x00" * 19)


class TestAddress:
    """Тесты разбора и построения адресов"""

    def test_decode_legacy(self):
        info = decode_address(LEGACY_P2PKH)
        assert info == AddressInfo('mainnet', P2KH, info.hash160, FORMAT_LEGACY)

    def test_legacy_and_cashaddr_share_hash(self):
        assert decode_address(LEGACY_P2PKH).hash160 == decode_address(CASHADDR_P2PKH).hash160
        assert decode_address(LEGACY_P2SH).hash160 == decode_address(CASHADDR_P2SH).hash160
        assert decode_address(LEGACY_P2SH).address_type == P2SH

    def test_convert_address(self):
        assert convert_address(LEGACY_P2PKH, FORMAT_CASHADDR) == CASHADDR_P2PKH
        assert convert_address(CASHADDR_P2SH, FORMAT_LEGACY) == LEGACY_P2SH
        assert convert_address(LEGACY_P2PKH, FORMAT_LEGACY) == LEGACY_P2PKH

    def test_testnet_legacy(self):
        hash_bytes = hashlib.sha256(b"testnet").digest()[:20]
        address = encode_address(hash_bytes, 'testnet', P2KH)

        assert address[0] in "mn"
        info = decode_address(address)
        assert info.network == 'testnet'
        assert info.hash160 == hash_bytes

    def test_address_from_private_key_one(self):
        """Известные адреса для секрета 1"""
        vk = SigningKey.from_secret_exponent(1, curve=SECP256k1).get_verifying_key()

        assert address_from_public_key(vk) == "1BgGZ9tcN4rm9KBzDn7KprQz87SZ26SAMH"
        assert address_from_public_key(vk, compressed=False) == "1EHNa6Q4Jz2uvNExL497mE43ikXhwF6kZm"

    def test_segwit_address_is_p2sh(self, signing_key):
        address = address_from_public_key(signing_key.get_verifying_key(), segwit=True)
        assert address.startswith("3")
        assert decode_address(address).address_type == P2SH

    def test_segwit_requires_compressed_key(self, signing_key):
        with pytest.raises(ValueError):
            address_from_public_key(signing_key.get_verifying_key(), compressed=False, segwit=True)

    @pytest.mark.parametrize("address", [
        "",
        "invalid_address",
        "1BpEi6DfDAUFd7GtittLSdBeYJvcoaVggv",  # checksum
        "bitcoincash:invalid",
    ])
    def test_decode_invalid(self, address):
        with pytest.raises(ValueError):
            decode_address(address)
