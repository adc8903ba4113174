from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from star_registry.dependencies import get_ledger
from star_registry.exceptions import (
    LedgerError,
    NotFoundError,
    ValidationError,
    ExpiredSubmissionError,
    SignatureVerificationError,
    DecodeError,
)
from star_registry.schemas.models import (
    BlockResponse,
    ChainHeight,
    ChainValidationReport,
    OwnershipChallenge,
    OwnershipRequest,
    StarRecord,
    StarSubmission,
)
from star_registry.services.ledger_service import Ledger

router = APIRouter(tags=["ledger"])

# Коды ответа для ошибок ядра
ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ExpiredSubmissionError: status.HTTP_400_BAD_REQUEST,
    SignatureVerificationError: status.HTTP_401_UNAUTHORIZED,
    DecodeError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _http_error(error: LedgerError) -> HTTPException:
    status_code = ERROR_STATUS.get(type(error), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return HTTPException(status_code=status_code, detail=str(error))


@router.get("/height", response_model=ChainHeight, summary="Высота цепочки")
async def chain_height(ledger: Ledger = Depends(get_ledger)):
    return ChainHeight(height=ledger.get_chain_height())


@router.get(
    "/block/height/{height}",
    response_model=BlockResponse,
    summary="Блок по высоте"
)  # Будет /api/v1/block/height/{height}
async def block_by_height(height: int, ledger: Ledger = Depends(get_ledger)):
    try:
        return BlockResponse.from_block(ledger.get_block_by_height(height))
    except NotFoundError as e:
        raise _http_error(e)


@router.get(
    "/block/hash/{block_hash}",
    response_model=BlockResponse,
    summary="Блок по хэшу"
)
async def block_by_hash(block_hash: str, ledger: Ledger = Depends(get_ledger)):
    try:
        return BlockResponse.from_block(ledger.get_block_by_hash(block_hash))
    except NotFoundError as e:
        raise _http_error(e)


@router.post(
    "/requestValidation",
    response_model=OwnershipChallenge,
    summary="Сообщение для подтверждения владения адресом"
)
async def request_validation(request: OwnershipRequest, ledger: Ledger = Depends(get_ledger)):
    """
    Выдача сообщения для подписи кошельком.

    Подписанное сообщение нужно отправить в /submitstar в течение 5 минут.
    """
    try:
        return OwnershipChallenge(message=ledger.request_ownership_challenge(request.address))
    except ValidationError as e:
        raise _http_error(e)


@router.post(
    "/submitstar",
    response_model=BlockResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Регистрация звезды"
)
async def submit_star(submission: StarSubmission, ledger: Ledger = Depends(get_ledger)):
    """
    Регистрация звезды за владельцем адреса.

    - **address**: адрес кошелька
    - **message**: сообщение из /requestValidation
    - **signature**: подпись сообщения кошельком (base64)
    - **star**: описание звезды (dec, ra, story)
    """
    try:
        block = await ledger.submit_star(
            submission.address,
            submission.message,
            submission.signature,
            submission.star.model_dump(exclude_none=True),
        )
    except LedgerError as e:
        raise _http_error(e)

    return BlockResponse.from_block(block)


@router.get(
    "/blocks/{address}",
    response_model=List[StarRecord],
    summary="Звезды владельца"
)
async def stars_by_owner(address: str, ledger: Ledger = Depends(get_ledger)):
    try:
        return ledger.get_stars_by_owner(address)
    except DecodeError as e:
        raise _http_error(e)


@router.get(
    "/validateChain",
    response_model=ChainValidationReport,
    summary="Проверка целостности цепочки"
)
async def validate_chain(ledger: Ledger = Depends(get_ledger)):
    errors = ledger.validate_chain()
    return ChainValidationReport(valid=not errors, errors=errors)
