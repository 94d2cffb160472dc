"""Error taxonomy shared by services, persistence and the HTTP facade."""

from __future__ import annotations

from typing import Optional, Sequence


class NeighborSwapError(Exception):
    """Base class for every failure a service can report to a caller."""

    code = "error"

    def __init__(self, message: str, *, fields: Optional[Sequence[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.fields = list(fields or [])


class ValidationError(NeighborSwapError):
    code = "validation_error"


class DuplicateAccount(NeighborSwapError):
    code = "duplicate_account"


class InvalidCredentials(NeighborSwapError):
    code = "invalid_credentials"


class Unauthenticated(NeighborSwapError):
    code = "unauthenticated"


class InvalidToken(NeighborSwapError):
    code = "invalid_token"


class Forbidden(NeighborSwapError):
    code = "forbidden"


class UploadRejected(NeighborSwapError):
    code = "upload_rejected"


class NotFound(NeighborSwapError):
    code = "not_found"


class StoreError(NeighborSwapError):
    """Unexpected persistence failure. Not correctable by the caller."""

    code = "store_error"
