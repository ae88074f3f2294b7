# coding: utf-8

from pydantic import BaseModel


class TokenModel(BaseModel):
    """Identity resolved from the API token of a request."""

    sub: str
    user_id: int | None = None
