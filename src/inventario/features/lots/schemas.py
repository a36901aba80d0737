from pydantic import BaseModel, Field
from typing import Dict, Optional
import datetime

from .states import CleaningStatus, CurrentStatus, MovementReason


class LotCreate(BaseModel):
    cantidad: int = Field(..., gt=0, description="Units entering the lot, all of them available")
    cleaning_status: CleaningStatus = Field(default=CleaningStatus.GOOD)
    ubicacion: Optional[str] = Field(None, max_length=255)


class LotResponse(BaseModel):
    id: int
    lote_numero: str = Field(..., description="KSUID lot number")
    elemento_id: int
    cantidad_total: int = Field(..., description="Sum of every bucket")
    distribucion: Dict[CurrentStatus, int] = Field(..., description="Units per operational status")
    estado_dominante: CurrentStatus
    cleaning_status: CleaningStatus
    ubicacion: Optional[str] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime


class MovementCreate(BaseModel):
    lote_id: int = Field(..., description="Lot whose units move")
    cantidad: int = Field(..., gt=0, description="Units to move")
    current_status_origen: CurrentStatus = Field(..., description="Bucket the units leave")
    current_status_destino: CurrentStatus = Field(..., description="Bucket the units enter")
    cleaning_status_destino: CleaningStatus
    motivo: Optional[MovementReason] = Field(
        None, description="Reason code; defaults to the one recommended for the transition"
    )
    descripcion: Optional[str] = None
    costo_reparacion: Optional[float] = Field(None, ge=0)


class RentRequest(BaseModel):
    lote_id: int
    cantidad: int = Field(..., gt=0)
    descripcion: Optional[str] = None


class ReturnRequest(BaseModel):
    lote_id: int
    cantidad: int = Field(..., gt=0)
    cleaning_status_devolucion: CleaningStatus = Field(
        ..., description="Condition the units came back in"
    )
    notas: Optional[str] = None
    costo_reparacion: Optional[float] = Field(None, ge=0)


class CleaningCompletedRequest(BaseModel):
    lote_id: int
    cantidad: int = Field(..., gt=0)
    notas: Optional[str] = None


class MovementResponse(BaseModel):
    id: int
    public_id: str
    lote_id: int
    elemento_id: int
    cantidad: int
    current_status_origen: CurrentStatus
    current_status_destino: CurrentStatus
    cleaning_status_origen: Optional[CleaningStatus] = None
    cleaning_status_destino: CleaningStatus
    motivo: MovementReason
    motivo_nombre: str
    descripcion: Optional[str] = None
    costo_reparacion: Optional[float] = None
    fecha_movimiento: datetime.datetime


class MovementResult(BaseModel):
    movimiento: MovementResponse
    lote: LotResponse


class ReasonInfo(BaseModel):
    codigo: MovementReason
    nombre: str
    categoria: str


class TransitionRecommendation(BaseModel):
    origen: CurrentStatus
    destino: CurrentStatus
    permitido: bool
    motivo: MovementReason
    cleaning_status: CleaningStatus
    mensaje: Optional[str] = None
