"""
Модели цепочки
"""
from star_registry.models.block import Block
from star_registry.models.payload import encode_payload, decode_payload

__all__ = ['Block', 'encode_payload', 'decode_payload']
