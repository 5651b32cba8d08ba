# services/errors.py
from typing import Any, List, Optional


class IngestionError(RuntimeError):
    """
    Fatal failure of one ingestion call.
    `errors` carries the underlying causes (exceptions or short messages).
    """
    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.message = message
        self.errors: List[Any] = list(errors or [])

    def __str__(self) -> str:
        if not self.errors:
            return self.message
        causes = "; ".join(str(e) for e in self.errors)
        return f"{self.message} ({causes})"


class RemoteLookupError(IngestionError):
    """The spec provider call failed or returned unusable data."""
    def __init__(self, message: str, status: Optional[int] = None,
                 errors: Optional[List[Any]] = None):
        super().__init__(message, errors=errors)
        self.status = status


class InvalidInputError(IngestionError):
    """Dealer input is missing required shape. Raised before any network call."""
    pass
