"""
GET /validate/{key} -- Look up a signature by ID or content hash.

Returns the first stored record, in insertion order, whose signature ID
or hash equals the key. IDs are not unique, so a later record sharing an
ID or hash with an earlier one is never returned by this endpoint.

The key may contain "/" (IDs are opaque strings chosen by the caller), so
the route uses a path converter. The lookup reads the whole record file,
so the handler is a plain def and runs in the threadpool.
"""

from fastapi import APIRouter, Depends

from signature_api.deps import get_store
from signature_api.errors import NotFound
from signature_api.models.schemas import NotFoundResponse, ValidateResponse
from signature_api.store import RecordStore

router = APIRouter()

NOT_FOUND_MESSAGE = "Assinatura não encontrada para este ID ou hash."


@router.get(
    "/validate/{key:path}",
    response_model=ValidateResponse,
    responses={404: {"model": NotFoundResponse}},
    summary="Validate a signature",
    description="Find a signature record by its signature ID or its document hash.",
    tags=["Signatures"],
)
def validate(key: str, store: RecordStore = Depends(get_store)) -> ValidateResponse:
    record = store.find(key)
    if record is None:
        raise NotFound(NOT_FOUND_MESSAGE)
    return ValidateResponse(record=record)
