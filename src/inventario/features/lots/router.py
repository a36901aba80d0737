"""API routes for lots and the movements between their status buckets."""
from typing import Dict, List

from fastapi import APIRouter, Query, status

from ...common.schemas import ApiResponse, envelope
from .schemas import (
    CleaningCompletedRequest,
    LotResponse,
    MovementCreate,
    MovementResponse,
    MovementResult,
    ReasonInfo,
    RentRequest,
    ReturnRequest,
    TransitionRecommendation,
)
from .states import CurrentStatus
from . import service

router = APIRouter(
    prefix="/lotes",
    tags=["Lotes"],
    responses={404: {"description": "Not found"}},
)

movements_router = APIRouter(
    prefix="/lote-movimientos",
    tags=["Movimientos de lotes"],
)


@router.get("/{lot_id}", response_model=ApiResponse[LotResponse], summary="Get a lot")
async def get_lot(lot_id: int):
    return envelope(await service.get_lot(lot_id))


@router.get(
    "/{lot_id}/distribucion",
    response_model=ApiResponse[Dict[CurrentStatus, int]],
    summary="Units of a lot per operational status",
)
async def get_lot_distribution(lot_id: int):
    return envelope(await service.get_lot_distribution(lot_id))


@movements_router.post(
    "/cambiar-estado",
    response_model=ApiResponse[MovementResult],
    status_code=status.HTTP_201_CREATED,
    summary="Move units of a lot between statuses",
)
async def change_status(movement_in: MovementCreate):
    result = await service.apply_movement(
        movement_in.lote_id,
        movement_in.cantidad,
        movement_in.current_status_origen,
        movement_in.current_status_destino,
        movement_in.cleaning_status_destino,
        movement_in.motivo,
        movement_in.descripcion,
        movement_in.costo_reparacion,
    )
    return envelope(result, "Movimiento registrado exitosamente")


@movements_router.post(
    "/alquilar",
    response_model=ApiResponse[MovementResult],
    status_code=status.HTTP_201_CREATED,
    summary="Rent out available units",
)
async def rent_out(request: RentRequest):
    result = await service.rent_out(request.lote_id, request.cantidad, request.descripcion)
    return envelope(result, "Alquiler registrado exitosamente")


@movements_router.post(
    "/devolucion",
    response_model=ApiResponse[MovementResult],
    status_code=status.HTTP_201_CREATED,
    summary="Return rented units",
)
async def process_return(request: ReturnRequest):
    result = await service.process_return(
        request.lote_id,
        request.cantidad,
        request.cleaning_status_devolucion,
        request.notas,
        request.costo_reparacion,
    )
    return envelope(result, "Devolución registrada exitosamente")


@movements_router.post(
    "/completar-limpieza",
    response_model=ApiResponse[MovementResult],
    status_code=status.HTTP_201_CREATED,
    summary="Finish cleaning units",
)
async def complete_cleaning(request: CleaningCompletedRequest):
    result = await service.complete_cleaning(request.lote_id, request.cantidad, request.notas)
    return envelope(result, "Limpieza completada exitosamente")


@movements_router.get(
    "/historial/{element_id}",
    response_model=ApiResponse[List[MovementResponse]],
    summary="Movement history of an element, newest first",
)
async def movement_history(element_id: int):
    return envelope(await service.movement_history(element_id))


@movements_router.get(
    "/motivos",
    response_model=ApiResponse[List[ReasonInfo]],
    summary="List movement reasons",
)
async def list_reasons():
    return envelope(service.list_reasons())


@movements_router.get(
    "/recomendacion",
    response_model=ApiResponse[TransitionRecommendation],
    summary="Recommended reason and cleaning status for a transition",
)
async def recommend(
    origen: CurrentStatus = Query(..., description="Origin status"),
    destino: CurrentStatus = Query(..., description="Destination status"),
):
    return envelope(service.recommend(origen, destino))
