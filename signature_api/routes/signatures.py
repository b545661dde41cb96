"""
POST /submit-signature -- Email a signed PDF and record the signature.

The signing page posts the PDF as base64 together with the signer's data.
The document is mailed to the operator (and to the signer, when an email
was given) and only after the mail goes out is the record appended to
the store.

If the send or the append fails the caller gets the same generic 500.
A send that succeeded followed by a failed append is therefore reported
as a plain failure even though the email is already delivered.
"""

import asyncio
import base64
import binascii
import logging

from fastapi import APIRouter, Depends

from signature_api.deps import get_operator_address, get_sender, get_store
from signature_api.errors import MISSING_FIELDS, BadRequest, Internal, SignatureServiceError, StorageFailure
from signature_api.models.schemas import (
    ErrorResponse,
    SubmitSignatureRequest,
    SubmitSignatureResponse,
)
from signature_api.notify.mailer import Attachment, NotificationSender
from signature_api.store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_PROVIDED = "não informado"
SENDER_NAME = "Assinatura Digital"
ATTACHMENT_NAME = "documento_assinado.pdf"


def decode_pdf(payload: str) -> bytes:
    """Decode base64, tolerating whitespace, data-URL prefixes and missing padding."""
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]
    compact = "".join(payload.split())
    compact += "=" * (-len(compact) % 4)
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise BadRequest("pdfBase64 não é um base64 válido.") from e


def build_subject(req: SubmitSignatureRequest) -> str:
    if req.signature_id:
        return f"Documento assinado - {req.client_name} - {req.signature_id}"
    return f"Documento assinado - {req.client_name}"


def build_body(req: SubmitSignatureRequest) -> str:
    return (
        "Documento assinado eletronicamente.\n"
        "Dados principais:\n"
        f"- ID da assinatura: {req.signature_id or NOT_PROVIDED}\n"
        f"- Nome: {req.client_name}\n"
        f"- CPF: {req.cpf or NOT_PROVIDED}\n"
        f"- Endereço: {req.address or NOT_PROVIDED}\n"
        f"- Doc. identidade: {req.identity_document or NOT_PROVIDED}\n"
        f"- E-mail do cliente: {req.client_email or NOT_PROVIDED}\n"
        f"- Data/hora: {req.timestamp}\n"
        f"- Hash SHA-256: {req.hash}\n"
    )


def record_fields(req: SubmitSignatureRequest, message_id: str) -> dict:
    """Everything the store persists for this submission, keyed by JSON name."""
    fields = req.model_dump(by_alias=True, exclude={"pdf_base64"})
    fields["messageIdEmail"] = message_id
    return fields


@router.post(
    "/submit-signature",
    response_model=SubmitSignatureResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Submit a signed document",
    description=(
        "Emails the signed PDF to the operator and the signer, then appends "
        "a signature record that can be looked up by ID or hash."
    ),
    tags=["Signatures"],
)
async def submit_signature(
    req: SubmitSignatureRequest,
    store: RecordStore = Depends(get_store),
    sender: NotificationSender = Depends(get_sender),
    operator_address: str = Depends(get_operator_address),
) -> SubmitSignatureResponse:
    missing = req.missing_required()
    if missing:
        logger.info("Submission rejected, missing fields: %s", ", ".join(missing))
        raise BadRequest(MISSING_FIELDS)

    pdf = decode_pdf(req.pdf_base64)

    recipients = [operator_address]
    if req.client_email:
        recipients.append(req.client_email)

    try:
        message_id = await sender.send(
            SENDER_NAME,
            recipients,
            build_subject(req),
            build_body(req),
            Attachment(ATTACHMENT_NAME, pdf),
        )
    except SignatureServiceError:
        raise
    except Exception as e:
        raise Internal(f"unexpected error sending signature email: {e}") from e

    try:
        record = await asyncio.to_thread(store.append, record_fields(req, message_id))
    except Exception as e:
        # The email is already out at this point.
        raise StorageFailure(f"email {message_id} sent but record not stored: {e}") from e

    return SubmitSignatureResponse(message_id=message_id, saved_record=record)
