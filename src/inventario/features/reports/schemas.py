"""Schemas for the movement and inventory status reports."""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
import datetime

from ..lots.states import CleaningStatus, CurrentStatus, MovementReason


# Helper schema for common time period queries
class TimePeriodQuery(BaseModel):
    fecha_inicio: Optional[datetime.date] = Field(None, description="First day of the period (YYYY-MM-DD)")
    fecha_fin: Optional[datetime.date] = Field(None, description="Last day of the period (YYYY-MM-DD)")


class ReasonStatistics(BaseModel):
    motivo: MovementReason
    motivo_nombre: str
    movimientos: int = Field(..., description="Number of movements with this reason")
    cantidad_total: int = Field(..., description="Units moved with this reason")
    costo_total: float = Field(..., description="Sum of the repair costs")


class MovementStatisticsResponse(BaseModel):
    elemento_id: int
    fecha_inicio: datetime.date
    fecha_fin: datetime.date
    total_movimientos: int
    por_motivo: List[ReasonStatistics]


class InventoryStatusResponse(BaseModel):
    elementos: int = Field(..., description="Lot-tracked elements considered")
    lotes: int
    total_unidades: int
    por_estado: Dict[CurrentStatus, int]
    por_limpieza: Dict[CleaningStatus, int] = Field(
        ..., description="Units per cleaning status of the lot holding them"
    )
    requieren_atencion: int = Field(..., description="Units in cleaning or maintenance")
    porcentaje_disponible: float
    tasa_utilizacion: float = Field(..., description="Rented units over total units, in percent")
