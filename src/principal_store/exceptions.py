"""Custom exceptions for the principal_store package."""

from __future__ import annotations

ERR_PRINCIPAL_NOT_FOUND = "ERR_PRINCIPAL_NOT_FOUND"
ERR_DATA_KEY_NOT_FOUND = "ERR_DATA_KEY_NOT_FOUND"
ERR_BACKEND = "ERR_BACKEND"


class PrincipalStoreError(Exception):
    """Base exception for all store errors."""

    code: str = ""


class PrincipalNotFoundError(PrincipalStoreError):
    """Raised when the principal has no record (or nothing at all) in the backend."""

    code = ERR_PRINCIPAL_NOT_FOUND

    def __init__(self, principal: str) -> None:
        self.principal = principal
        super().__init__(f"Principal '{principal}' not found in database")


class DataKeyNotFoundError(PrincipalStoreError):
    """Raised when a data entry (or record field) does not exist for a principal."""

    code = ERR_DATA_KEY_NOT_FOUND

    def __init__(self, principal: str, key: str) -> None:
        self.principal = principal
        self.key = key
        super().__init__(f"Data key '{key}' not found for principal '{principal}'")


class BackendError(PrincipalStoreError):
    """Raised when the backing document store call itself failed.

    The original exception is available as ``cause`` and as ``__cause__``.
    """

    code = ERR_BACKEND

    def __init__(self, operation: str, path: str, cause: BaseException) -> None:
        self.operation = operation
        self.path = path
        self.cause = cause
        super().__init__(f"Backend error during '{operation}' on '{path}': {cause}")
