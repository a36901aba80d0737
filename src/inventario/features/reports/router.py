"""Reporting API endpoints.

Movement statistics per element and a snapshot of the lot-tracked
inventory. All report handlers delegate to service functions that contain
the actual aggregation logic."""
from fastapi import APIRouter, Depends

from ...common.schemas import ApiResponse, envelope
from .schemas import InventoryStatusResponse, MovementStatisticsResponse, TimePeriodQuery
from . import service as report_service

router = APIRouter(
    prefix="/reportes",
    tags=["Reportes"],
    responses={404: {"description": "Not found"}},
)


@router.get(
    "/movimientos/{element_id}",
    response_model=ApiResponse[MovementStatisticsResponse],
)
async def get_movement_statistics(
    element_id: int,
    period: TimePeriodQuery = Depends(),  # Injects query params from TimePeriodQuery
):
    return envelope(
        await report_service.generate_movement_statistics(
            element_id, start_date=period.fecha_inicio, end_date=period.fecha_fin
        )
    )


@router.get("/estado-inventario", response_model=ApiResponse[InventoryStatusResponse])
async def get_inventory_status():
    return envelope(await report_service.generate_inventory_status_report())
