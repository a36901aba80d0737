from pydantic import BaseModel, Field
from typing import Optional

from .models import UnitKind


class MaterialCreate(BaseModel):
    nombre: str = Field(..., min_length=1, max_length=100, description="Name of the material")


class MaterialResponse(BaseModel):
    id: int
    nombre: str


class UnitCreate(BaseModel):
    nombre: str = Field(..., min_length=1, max_length=50, description="Name of the unit")
    abreviatura: Optional[str] = Field(None, max_length=10, description="Short symbol, e.g. 'kg'")
    tipo: UnitKind = Field(default=UnitKind.UNIT, description="What the unit measures")


class UnitResponse(BaseModel):
    id: int
    nombre: str
    abreviatura: Optional[str] = None
    tipo: UnitKind
