"""Error taxonomy for the inventory API.

Every error is an ``HTTPException`` so services can raise it directly, the
same way they would raise a plain ``HTTPException``, and the application's
exception handlers render it with the standard failure envelope. The class
carries the domain meaning; the status code follows from the class.
"""

from typing import Optional

from fastapi import HTTPException, status


class InventoryError(HTTPException):
    """Base class for inventory errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Error interno del servidor"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(
            status_code=self.status_code, detail=message or self.default_message
        )

    @property
    def message(self) -> str:
        return self.detail


class ValidationError(InventoryError):
    """Raised when input is malformed, missing or out of range."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Datos inválidos"


class NotFoundError(InventoryError):
    """Raised when a referenced id does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Recurso no encontrado"


class ConflictError(InventoryError):
    """Raised on uniqueness or referential-integrity violations."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Ya existe un registro con ese valor único"


class InsufficientQuantityError(InventoryError):
    """Raised when a movement asks for more units than a bucket holds."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Cantidad insuficiente"


class UnavailableError(InventoryError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "No se pudo conectar a la base de datos"


class InternalError(InventoryError):
    pass
