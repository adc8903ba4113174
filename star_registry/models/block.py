import hashlib
from typing import Any, Dict, Optional

from star_registry.models.payload import canonical_json, encode_payload, decode_payload


class Block:
    """
    Блок цепочки.

    Поля height, time, previous_hash и hash заполняет Ledger при добавлении,
    hash вычисляется последним.
    """

    def __init__(self, data: Any = None, body: Optional[str] = None):
        self.height: Optional[int] = None
        self.time: Optional[int] = None
        self.previous_hash: Optional[str] = None
        self.hash: Optional[str] = None
        self.body: str = body if body is not None else encode_payload(data)

    def hashable_fields(self) -> Dict[str, Any]:
        """Все поля блока кроме hash"""
        return {
            "height": self.height,
            "time": self.time,
            "previousHash": self.previous_hash,
            "body": self.body,
        }

    def compute_hash(self) -> str:
        """SHA-256 от канонического JSON полей блока (без hash)"""
        return hashlib.sha256(canonical_json(self.hashable_fields()).encode('utf-8')).hexdigest()

    def validate(self) -> bool:
        """Совпадает ли сохраненный hash с пересчитанным"""
        return self.hash == self.compute_hash()

    def decode_payload(self) -> Any:
        return decode_payload(self.body)

    # ---------- Сериализация ----------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "height": self.height,
            "time": self.time,
            "previousHash": self.previous_hash,
            "hash": self.hash,
            "body": self.body,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Block":
        block = Block(body=data["body"])
        block.height = data["height"]
        block.time = data["time"]
        block.previous_hash = data.get("previousHash")
        block.hash = data["hash"]
        return block

    def __repr__(self) -> str:
        return f"<Block height={self.height} hash={self.hash}>"
