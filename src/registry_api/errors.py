"""Error types surfaced by the registry and their HTTP rendering."""

from __future__ import annotations

from typing import Iterable

from fastapi import status


class RegistryError(Exception):
    """Base error; carries one or more human readable details."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, details: str | Iterable[str], *, status_code: int | None = None) -> None:
        if isinstance(details, str):
            details = [details]
        self.details: list[str] = list(details)
        if status_code is not None:
            self.status_code = status_code
        super().__init__("; ".join(self.details))

    @property
    def detail(self) -> str:
        return self.details[0] if self.details else ""

    def to_body(self) -> dict:
        return {"errors": [{"detail": detail} for detail in self.details]}


class ValidationFailed(RegistryError):
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthorized(RegistryError):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, details: str | Iterable[str] = "must be logged in to perform that action") -> None:
        super().__init__(details)


class Forbidden(RegistryError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(RegistryError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, details: str | Iterable[str] = "Not Found") -> None:
        super().__init__(details)


class Conflict(RegistryError):
    status_code = status.HTTP_409_CONFLICT


class DependencyError(RegistryError):
    status_code = status.HTTP_400_BAD_REQUEST


class InternalError(RegistryError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ProviderError(RegistryError):
    status_code = status.HTTP_502_BAD_GATEWAY


def error_body(details: Iterable[str]) -> dict:
    return {"errors": [{"detail": detail} for detail in details]}
