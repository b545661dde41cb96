"""
Service configuration, read once from the environment at import time.

Every value has a fallback so the service starts locally without any
setup. The mail fallbacks are placeholders -- a real deployment sets
EMAIL_USER and EMAIL_PASS (a Gmail app password, not the account password).
"""

import os
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent.parent

# ---------------------------------------------------------------------------
# Mail account
#
# EMAIL_USER is both the sending account and the operator address that
# receives a copy of every signed document.
# ---------------------------------------------------------------------------

EMAIL_USER = os.getenv("EMAIL_USER", "seu-email-aqui@gmail.com")
EMAIL_PASS = os.getenv("EMAIL_PASS", "sua-senha-de-app-aqui")

SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT = int(os.getenv("SMTP_PORT", "465"))  # implicit TLS

# ---------------------------------------------------------------------------
# Storage and static files
# ---------------------------------------------------------------------------

REGISTROS_PATH = Path(os.getenv("REGISTROS_PATH", "assinaturas.json"))
FRONTEND_DIR = Path(os.getenv("FRONTEND_DIR", str(ROOT_DIR / "frontend")))

# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

MAX_BODY_BYTES = int(os.getenv("MAX_BODY_BYTES", str(15 * 1024 * 1024)))
PORT = int(os.getenv("PORT", "3000"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
