"""
GET /test-notification -- Check that the server can send email.

Sends a short message with no attachment to the operator address only.
Nothing is recorded. Useful right after deploying, to confirm the SMTP
credentials before anyone signs a real document.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from signature_api.deps import get_operator_address, get_sender
from signature_api.notify.mailer import NotificationSender

logger = logging.getLogger(__name__)

router = APIRouter()

TEST_SENDER_NAME = "Teste Assinatura"
TEST_SUBJECT = "Teste de envio de e-mail (sem PDF)"
TEST_BODY = (
    "Se você recebeu este e-mail, o servidor está autorizado a enviar "
    "e-mails pelo Gmail."
)


@router.get(
    "/test-notification",
    response_class=PlainTextResponse,
    summary="Send a test email",
    tags=["System"],
)
async def test_notification(
    sender: NotificationSender = Depends(get_sender),
    operator_address: str = Depends(get_operator_address),
) -> PlainTextResponse:
    try:
        message_id = await sender.send(
            TEST_SENDER_NAME, [operator_address], TEST_SUBJECT, TEST_BODY,
        )
    except Exception:
        logger.exception("Test email failed")
        return PlainTextResponse(
            "Erro ao enviar e-mail de teste. Veja o console do servidor.",
            status_code=500,
        )

    logger.info("Test email sent: %s", message_id)
    return PlainTextResponse("E-mail de teste enviado com sucesso! Veja sua caixa de entrada.")
