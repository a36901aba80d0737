"""API routes for the material and unit catalogues."""
from typing import List

from fastapi import APIRouter, status

from ...common.schemas import ApiResponse, envelope
from .schemas import MaterialCreate, MaterialResponse, UnitCreate, UnitResponse
from . import service

router = APIRouter(tags=["Catálogos"])


@router.get(
    "/materiales",
    response_model=ApiResponse[List[MaterialResponse]],
    summary="List materials",
)
async def list_materials():
    return envelope(await service.list_materials())


@router.post(
    "/materiales",
    response_model=ApiResponse[MaterialResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a material",
)
async def create_material(material_in: MaterialCreate):
    return envelope(await service.create_material(material_in), "Material creado exitosamente")


@router.get(
    "/unidades",
    response_model=ApiResponse[List[UnitResponse]],
    summary="List measurement units",
)
async def list_units():
    return envelope(await service.list_units())


@router.post(
    "/unidades",
    response_model=ApiResponse[UnitResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a measurement unit",
)
async def create_unit(unit_in: UnitCreate):
    return envelope(await service.create_unit(unit_in), "Unidad creada exitosamente")
