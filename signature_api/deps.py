"""
FastAPI dependencies.

The store and the mail sender are built once in create_app() and kept on
app.state. Handlers receive them through Depends so tests can hand
create_app() a temp-file store and a fake sender.
"""

from fastapi import Request

from signature_api.notify.mailer import NotificationSender
from signature_api.store import RecordStore


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_sender(request: Request) -> NotificationSender:
    return request.app.state.sender


def get_operator_address(request: Request) -> str:
    return request.app.state.operator_address
