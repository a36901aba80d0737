"""
Reports Service Module

Aggregations over lots and their movement history: per-reason movement
statistics for one element and a snapshot of the whole lot-tracked
inventory.
"""

import datetime
import logging
from typing import Dict, Optional

from ...common.exceptions import NotFoundError, ValidationError
from ..elements.models import Element
from ..lots.models import Lot, LotMovement
from ..lots.states import BUCKET_ORDER, MOVEMENT_REASONS, CleaningStatus, CurrentStatus, MovementReason
from .schemas import InventoryStatusResponse, MovementStatisticsResponse, ReasonStatistics

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 30


def _percent(part: int, whole: int) -> float:
    return round(part * 100.0 / whole, 2) if whole else 0.0


async def generate_movement_statistics(
    element_id: int,
    start_date: Optional[datetime.date] = None,
    end_date: Optional[datetime.date] = None,
) -> MovementStatisticsResponse:
    """
    Summarises the movements of an element per reason.

    Args:
        element_id: The element whose lots are reported.
        start_date: First day included; defaults to 30 days before ``end_date``.
        end_date: Last day included; defaults to today.

    Returns:
        MovementStatisticsResponse: For every reason used in the period, the
            number of movements, the units moved and the summed repair cost.
    """
    if not await Element.exists(id=element_id):
        raise NotFoundError(f"Elemento {element_id} no encontrado")

    end_date = end_date or datetime.date.today()
    start_date = start_date or end_date - datetime.timedelta(days=DEFAULT_WINDOW_DAYS)
    if start_date > end_date:
        raise ValidationError("fecha_inicio no puede ser posterior a fecha_fin")

    # Add 1 day to end_date to make it inclusive
    period_start = datetime.datetime.combine(start_date, datetime.time.min)
    period_end = datetime.datetime.combine(end_date + datetime.timedelta(days=1), datetime.time.min)
    movements = await LotMovement.filter(
        element_id=element_id, moved_at__gte=period_start, moved_at__lt=period_end
    ).values("reason", "quantity", "repair_cost")

    stats: Dict[MovementReason, ReasonStatistics] = {}
    for movement in movements:
        reason = MovementReason(movement["reason"])
        entry = stats.get(reason)
        if entry is None:
            entry = stats[reason] = ReasonStatistics(
                motivo=reason,
                motivo_nombre=MOVEMENT_REASONS[reason][0],
                movimientos=0,
                cantidad_total=0,
                costo_total=0.0,
            )
        entry.movimientos += 1
        entry.cantidad_total += movement["quantity"]
        entry.costo_total += movement["repair_cost"] or 0.0

    return MovementStatisticsResponse(
        elemento_id=element_id,
        fecha_inicio=start_date,
        fecha_fin=end_date,
        total_movimientos=len(movements),
        por_motivo=sorted(stats.values(), key=lambda s: (-s.cantidad_total, -s.movimientos, s.motivo.value)),
    )


async def generate_inventory_status_report() -> InventoryStatusResponse:
    """Totals over every lot: units per status and per cleaning status, attention and usage figures."""
    lots = await Lot.all()
    by_status = {status: 0 for status in BUCKET_ORDER}
    by_cleaning = {status: 0 for status in CleaningStatus}
    for lot in lots:
        for status, count in lot.distribution().items():
            by_status[status] += count
        by_cleaning[lot.cleaning_status] += lot.total

    total = sum(by_status.values())
    attention = by_status[CurrentStatus.CLEANING] + by_status[CurrentStatus.MAINTENANCE]
    logger.debug("Inventory status computed over %s lots (%s units)", len(lots), total)
    return InventoryStatusResponse(
        elementos=len({lot.element_id for lot in lots}),
        lotes=len(lots),
        total_unidades=total,
        por_estado=by_status,
        por_limpieza=by_cleaning,
        requieren_atencion=attention,
        porcentaje_disponible=_percent(by_status[CurrentStatus.AVAILABLE], total),
        tasa_utilizacion=_percent(by_status[CurrentStatus.RENTED], total),
    )
