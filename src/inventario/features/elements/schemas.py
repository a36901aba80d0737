from pydantic import BaseModel, Field
from typing import Dict, List, Literal, Optional, Union
import datetime

from ..lots.schemas import LotResponse
from ..lots.states import CurrentStatus
from .models import ElementStatus


# --- Serial Schemas ---
class SerialIn(BaseModel):
    numero_serie: str = Field(..., max_length=100, description="Unique serial number of the unit")
    estado: ElementStatus = Field(default=ElementStatus.NEW)
    fecha_ingreso: Optional[datetime.date] = Field(None, description="Intake date; defaults to today")
    ubicacion: Optional[str] = Field(None, max_length=255)


class SerialCreate(SerialIn):
    elemento_id: int = Field(..., description="Serial-tracked element the unit belongs to")


class SerialUpdate(BaseModel):
    numero_serie: Optional[str] = Field(None, min_length=1, max_length=100)
    estado: Optional[ElementStatus] = None
    fecha_ingreso: Optional[datetime.date] = None
    ubicacion: Optional[str] = Field(None, max_length=255)


class SerialResponse(BaseModel):
    id: int
    elemento_id: int
    numero_serie: str
    estado: ElementStatus
    fecha_ingreso: datetime.date
    ubicacion: Optional[str] = None


# --- Element Schemas ---
class ElementCreate(BaseModel):
    nombre: str = Field(..., min_length=1, max_length=255, description="Name of the element")
    descripcion: Optional[str] = None
    cantidad: int = Field(default=0, ge=0, description="Units; must equal len(series) when serial-tracked")
    requiere_series: bool = Field(default=False, description="Track every unit by serial number")
    estado: ElementStatus = Field(default=ElementStatus.GOOD)
    ubicacion: Optional[str] = Field(None, max_length=255, description="Only used without serials")
    categoria_id: Optional[int] = None
    material_id: Optional[int] = None
    unidad_id: Optional[int] = None
    series: List[SerialIn] = Field(default_factory=list)


class ElementUpdate(BaseModel):
    nombre: Optional[str] = Field(None, min_length=1, max_length=255)
    descripcion: Optional[str] = None
    cantidad: Optional[int] = Field(None, ge=0)
    requiere_series: Optional[bool] = None
    estado: Optional[ElementStatus] = None
    ubicacion: Optional[str] = Field(None, max_length=255)
    categoria_id: Optional[int] = None
    material_id: Optional[int] = None
    unidad_id: Optional[int] = None
    series: Optional[List[SerialIn]] = Field(None, description="Replaces every stored serial")


class ElementBaseResponse(BaseModel):
    id: int
    nombre: str
    descripcion: Optional[str] = None
    cantidad: int
    categoria_id: Optional[int] = None
    categoria_nombre: Optional[str] = None
    material_id: Optional[int] = None
    material_nombre: Optional[str] = None
    unidad_id: Optional[int] = None
    unidad_nombre: Optional[str] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime


class ElementSummary(ElementBaseResponse):
    requiere_series: bool
    estado: ElementStatus
    ubicacion: Optional[str] = None


class SerialTrackedElementResponse(ElementBaseResponse):
    requiere_series: Literal[True] = True
    estado: ElementStatus
    series: List[SerialResponse] = Field(default_factory=list)


class LotTrackedElementResponse(ElementBaseResponse):
    requiere_series: Literal[False] = False
    ubicacion: Optional[str] = None
    lotes: List[LotResponse] = Field(default_factory=list)
    distribucion: Dict[CurrentStatus, int] = Field(..., description="Units per operational status across lots")
    estado_dominante: CurrentStatus


ElementDetail = Union[SerialTrackedElementResponse, LotTrackedElementResponse]
