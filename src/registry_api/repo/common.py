from __future__ import annotations

import secrets
from datetime import date, datetime, timezone


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _today() -> date:
    return _now().date()


def _generate_api_token() -> str:
    return secrets.token_hex(16)
