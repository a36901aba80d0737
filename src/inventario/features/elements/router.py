"""API routes for elements and their serial numbers."""
from typing import List, Optional

from fastapi import APIRouter, Query, status

from ...common.schemas import ApiResponse, DeletedResponse, envelope
from ..lots import service as lot_service
from ..lots.schemas import LotCreate, LotResponse
from .schemas import (
    ElementCreate,
    ElementDetail,
    ElementSummary,
    ElementUpdate,
    SerialCreate,
    SerialResponse,
    SerialUpdate,
)
from . import service

router = APIRouter(
    prefix="/elementos",
    tags=["Elementos"],
    responses={404: {"description": "Not found"}},
)

serials_router = APIRouter(
    prefix="/series",
    tags=["Series"],
    responses={404: {"description": "Not found"}},
)


@router.get(
    "",
    response_model=ApiResponse[List[ElementSummary]],
    summary="List elements",
)
async def list_elements(
    categoria_id: Optional[int] = Query(None, description="Only elements of this category"),
    incluir_subcategorias: bool = Query(
        False, description="Also include elements of the descendants of the category"
    ),
):
    return envelope(await service.list_elements(categoria_id, incluir_subcategorias))


@router.post(
    "",
    response_model=ApiResponse[ElementDetail],
    status_code=status.HTTP_201_CREATED,
    summary="Create an element",
)
async def create_element(element_in: ElementCreate):
    return envelope(await service.create_element(element_in), "Elemento creado exitosamente")


@router.get(
    "/{element_id}",
    response_model=ApiResponse[ElementDetail],
    summary="Get an element with its serials or lots",
)
async def get_element(element_id: int):
    return envelope(await service.get_element(element_id))


@router.put(
    "/{element_id}",
    response_model=ApiResponse[ElementDetail],
    summary="Update an element",
)
async def update_element(element_id: int, element_in: ElementUpdate):
    return envelope(
        await service.update_element(element_id, element_in),
        "Elemento actualizado exitosamente",
    )


@router.delete(
    "/{element_id}",
    response_model=ApiResponse[DeletedResponse],
    summary="Delete an element",
)
async def delete_element(element_id: int):
    await service.delete_element(element_id)
    return envelope(DeletedResponse(id=element_id), "Elemento eliminado exitosamente")


@router.get(
    "/{element_id}/lotes",
    response_model=ApiResponse[List[LotResponse]],
    summary="List the lots of an element",
    tags=["Lotes"],
)
async def list_element_lots(element_id: int):
    return envelope(await lot_service.list_element_lots(element_id))


@router.post(
    "/{element_id}/lotes",
    response_model=ApiResponse[LotResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Open a new lot for an element",
    tags=["Lotes"],
)
async def create_element_lot(element_id: int, lot_in: LotCreate):
    return envelope(await lot_service.create_lot(element_id, lot_in), "Lote creado exitosamente")


# --- Serials ---
@serials_router.get(
    "/elemento/{element_id}",
    response_model=ApiResponse[List[SerialResponse]],
    summary="List the serials of an element",
)
async def list_serials(element_id: int):
    return envelope(await service.list_serials(element_id))


@serials_router.get(
    "/{serial_id}",
    response_model=ApiResponse[SerialResponse],
    summary="Get a serial",
)
async def get_serial(serial_id: int):
    return envelope(await service.get_serial(serial_id))


@serials_router.post(
    "",
    response_model=ApiResponse[SerialResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register a serial",
)
async def create_serial(serial_in: SerialCreate):
    return envelope(await service.create_serial(serial_in), "Serie creada exitosamente")


@serials_router.put(
    "/{serial_id}",
    response_model=ApiResponse[SerialResponse],
    summary="Update a serial",
)
async def update_serial(serial_id: int, serial_in: SerialUpdate):
    return envelope(await service.update_serial(serial_id, serial_in), "Serie actualizada exitosamente")


@serials_router.delete(
    "/{serial_id}",
    response_model=ApiResponse[DeletedResponse],
    summary="Delete a serial",
)
async def delete_serial(serial_id: int):
    await service.delete_serial(serial_id)
    return envelope(DeletedResponse(id=serial_id), "Serie eliminada exitosamente")
