"""Application error taxonomy.

Every error is an ``HTTPException`` so FastAPI renders it without extra
translation wherever it is raised: services, repositories or dependencies.
"""

from typing import Any

from fastapi import HTTPException, status


class ErrorDetail(dict):
    """A single ``{code, description}`` error entry."""

    def __init__(self, code: str, description: str) -> None:
        super().__init__(code=code, description=description)

    @property
    def code(self) -> str:
        return self["code"]

    @property
    def description(self) -> str:
        return self["description"]


class ValidationError(HTTPException):
    """Bad input shape or policy violation."""

    def __init__(self, errors: list[ErrorDetail] | str | Any) -> None:
        if isinstance(errors, str):
            errors = [ErrorDetail("ValidationFailed", errors)]
        self.errors = errors
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=errors)


class ConflictError(ValidationError):
    """Duplicate registration. Rendered with the validation response shape."""

    def __init__(self, code: str, description: str) -> None:
        super().__init__([ErrorDetail(code, description)])


class UnauthorizedError(HTTPException):
    """Bad credentials or a missing/invalid bearer token."""

    def __init__(self, detail: str = "Unauthorized") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class NotFoundError(HTTPException):
    """Missing resource."""

    def __init__(self, detail: str = "Not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
