"""
Подписанные сообщения кошельков
"""
from star_registry.crypto.message import verify_message, sign_message, magic_hash

__all__ = ["verify_message", "sign_message", "magic_hash"]
