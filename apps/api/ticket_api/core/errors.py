"""Typed failures raised by the ticket engine.

Every failure carries a stable ``kind`` and a default HTTP ``status_code``.
Routers translate them with :func:`raise_http`; the engine itself never
builds transport responses.
"""

from fastapi import HTTPException


class EngineError(Exception):
    kind = "internal"
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class NotFound(EngineError):
    kind = "not_found"
    status_code = 404


class Inactive(EngineError):
    kind = "inactive"
    status_code = 400


class Unauthorized(EngineError):
    kind = "unauthorized"
    status_code = 401


class Forbidden(Unauthorized):
    # Relationship operations report missing permission as 403.
    status_code = 403


class InvalidInput(EngineError):
    kind = "invalid_input"
    status_code = 400


class Conflict(EngineError):
    kind = "conflict"
    status_code = 409


class Unavailable(EngineError):
    kind = "unavailable"
    status_code = 501


class Internal(EngineError):
    kind = "internal"
    status_code = 500


def to_http(exc: EngineError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)


def raise_http(exc: EngineError):
    raise to_http(exc) from exc
