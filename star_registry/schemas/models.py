"""
Pydantic схемы запросов и ответов API реестра
"""
from typing import Optional, List, Any
from pydantic import BaseModel, Field, ConfigDict, StringConstraints
from typing_extensions import Annotated

from star_registry.models.block import Block

WalletAddress = Annotated[str, StringConstraints(min_length=1, max_length=128, strip_whitespace=True)]


# ========== ЗВЕЗДЫ ==========
class Star(BaseModel):
    """Описание звезды; дополнительные поля сохраняются как есть"""
    dec: str = Field(description="Склонение")
    ra: str = Field(description="Прямое восхождение")
    story: str = Field(default="", max_length=500, description="История звезды")
    mag: Optional[str] = Field(default=None, description="Звездная величина")
    cen: Optional[str] = Field(default=None, description="Созвездие")

    model_config = ConfigDict(extra="allow")


class OwnershipRequest(BaseModel):
    """Запрос сообщения для подписи"""
    address: WalletAddress = Field(description="Адрес кошелька")


class OwnershipChallenge(BaseModel):
    """Сообщение для подписи кошельком"""
    message: str


class StarSubmission(BaseModel):
    """Подача звезды с подписанным сообщением"""
    address: WalletAddress = Field(description="Адрес кошелька")
    message: str = Field(min_length=1, description="Сообщение из /requestValidation")
    signature: str = Field(min_length=1, description="Подпись сообщения в base64")
    star: Star


# ========== БЛОКИ ==========
class BlockResponse(BaseModel):
    """Блок во внешнем представлении"""
    height: int
    time: int
    previousHash: Optional[str] = None
    hash: str
    body: str

    @classmethod
    def from_block(cls, block: Block) -> "BlockResponse":
        return cls(**block.to_dict())


class StarRecord(BaseModel):
    """Декодированные данные блока звезды"""
    owner: str
    star: Any


class ChainHeight(BaseModel):
    height: int


class ChainValidationReport(BaseModel):
    """Результат проверки цепочки"""
    valid: bool
    errors: List[str] = Field(default_factory=list)
