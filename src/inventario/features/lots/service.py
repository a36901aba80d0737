import logging
from typing import Dict, Iterable, List, Optional, Union

from tortoise.transactions import in_transaction

from ...common.exceptions import InsufficientQuantityError, NotFoundError, ValidationError
from ..elements.models import Element
from .models import Lot, LotMovement
from .schemas import (
    LotCreate,
    LotResponse,
    MovementResponse,
    MovementResult,
    ReasonInfo,
    TransitionRecommendation,
)
from .states import (
    BUCKET_ORDER,
    CURRENT_STATUS_LABELS,
    MOVEMENT_REASONS,
    CleaningStatus,
    CurrentStatus,
    MovementReason,
    dominant_status,
    invalid_transition_message,
    is_valid_transition,
    recommended_cleaning_status,
    recommended_reason,
    return_route,
)

logger = logging.getLogger(__name__)


def to_lot_response(lot: Lot) -> LotResponse:
    """Converts a Lot model instance to a LotResponse schema."""
    distribution = lot.distribution()
    return LotResponse(
        id=lot.id,
        lote_numero=lot.lot_number,
        elemento_id=lot.element_id,
        cantidad_total=lot.total,
        distribucion=distribution,
        estado_dominante=dominant_status(distribution),
        cleaning_status=lot.cleaning_status,
        ubicacion=lot.location,
        created_at=lot.created_at,
        updated_at=lot.updated_at,
    )


def _to_movement_response(movement: LotMovement) -> MovementResponse:
    return MovementResponse(
        id=movement.id,
        public_id=movement.public_id,
        lote_id=movement.lot_id,
        elemento_id=movement.element_id,
        cantidad=movement.quantity,
        current_status_origen=movement.from_status,
        current_status_destino=movement.to_status,
        cleaning_status_origen=movement.cleaning_status_from,
        cleaning_status_destino=movement.cleaning_status_to,
        motivo=movement.reason,
        motivo_nombre=MOVEMENT_REASONS[movement.reason][0],
        descripcion=movement.description,
        costo_reparacion=movement.repair_cost,
        fecha_movimiento=movement.moved_at,
    )


def summarize_lots(lots: Iterable[Lot]) -> Dict[CurrentStatus, int]:
    """Adds up the buckets of several lots."""
    totals = {status: 0 for status in BUCKET_ORDER}
    for lot in lots:
        for status, count in lot.distribution().items():
            totals[status] += count
    return totals


def _coerce(enum_type, value, label: str):
    try:
        return enum_type(value)
    except ValueError:
        raise ValidationError(f"{label} inválido: {value}")


async def _get_lot_or_404(lot_id: int, using_db=None) -> Lot:
    lot = await Lot.get_or_none(id=lot_id, using_db=using_db)
    if not lot:
        raise NotFoundError(f"Lote {lot_id} no encontrado")
    return lot


async def _get_element_or_404(element_id: int) -> Element:
    element = await Element.get_or_none(id=element_id)
    if not element:
        raise NotFoundError(f"Elemento {element_id} no encontrado")
    return element


async def get_lot(lot_id: int) -> LotResponse:
    return to_lot_response(await _get_lot_or_404(lot_id))


async def get_lot_distribution(lot_id: int) -> Dict[CurrentStatus, int]:
    lot = await _get_lot_or_404(lot_id)
    return lot.distribution()


async def list_element_lots(element_id: int) -> List[LotResponse]:
    await _get_element_or_404(element_id)
    lots = await Lot.filter(element_id=element_id).order_by("id")
    return [to_lot_response(lot) for lot in lots]


async def create_lot(element_id: int, lot_in: LotCreate) -> LotResponse:
    """
    Opens a new lot for an element; every unit starts as available.

    The element quantity grows by the size of the lot. Serial-tracked
    elements have no lots.
    """
    async with in_transaction() as conn:
        element = await Element.get_or_none(id=element_id, using_db=conn).select_for_update()
        if not element:
            raise NotFoundError(f"Elemento {element_id} no encontrado")
        if element.requires_serials:
            raise ValidationError(
                f"El elemento {element_id} se controla por números de serie y no admite lotes"
            )
        lot = await Lot.create(
            element=element,
            available=lot_in.cantidad,
            cleaning_status=lot_in.cleaning_status,
            location=lot_in.ubicacion,
            using_db=conn,
        )
        element.quantity += lot_in.cantidad
        await element.save(using_db=conn, update_fields=["quantity"])

    logger.info("Lot %s opened for element %s with %s units", lot.lot_number, element_id, lot_in.cantidad)
    return to_lot_response(lot)


async def apply_movement(
    lot_id: int,
    quantity: int,
    from_status: Union[CurrentStatus, str],
    to_status: Union[CurrentStatus, str],
    cleaning_status: Union[CleaningStatus, str],
    reason: Optional[Union[MovementReason, str]] = None,
    description: Optional[str] = None,
    repair_cost: Optional[float] = None,
) -> MovementResult:
    """
    Moves units of a lot from one status bucket to another.

    The transition must be allowed and the origin bucket must hold enough
    units. The lot row is locked while both buckets are updated and the
    movement is recorded, so either all of it happens or none of it does.

    Args:
        lot_id: The lot whose units move.
        quantity: How many units move; must be positive.
        from_status: The bucket the units leave.
        to_status: The bucket the units enter.
        cleaning_status: The cleaning status the lot takes after the move.
        reason: Reason code; the recommended one for the transition if omitted.
        description: Free text stored with the movement.
        repair_cost: Cost attached to the movement, if any.

    Returns:
        The recorded movement and the lot as it is after the move.
    """
    origin = _coerce(CurrentStatus, from_status, "Estado de origen")
    destination = _coerce(CurrentStatus, to_status, "Estado de destino")
    cleaning = _coerce(CleaningStatus, cleaning_status, "Estado de limpieza")
    reason = (
        _coerce(MovementReason, reason, "Motivo")
        if reason is not None
        else recommended_reason(origin, destination)
    )
    if quantity is None or quantity <= 0:
        raise ValidationError("La cantidad debe ser mayor que cero")
    if not is_valid_transition(origin, destination):
        raise ValidationError(invalid_transition_message(origin, destination))

    async with in_transaction() as conn:
        lot = await Lot.get_or_none(id=lot_id, using_db=conn).select_for_update()
        if not lot:
            raise NotFoundError(f"Lote {lot_id} no encontrado")

        available = lot.bucket(origin)
        if available < quantity:
            raise InsufficientQuantityError(
                f"Cantidad insuficiente en {CURRENT_STATUS_LABELS[origin]}. "
                f"Disponible: {available}, Solicitado: {quantity}"
            )

        previous_cleaning = lot.cleaning_status
        lot.set_bucket(origin, available - quantity)
        lot.set_bucket(destination, lot.bucket(destination) + quantity)
        lot.cleaning_status = cleaning
        await lot.save(
            using_db=conn,
            update_fields=[
                "available", "rented", "cleaning", "maintenance", "retired",
                "cleaning_status", "updated_at",
            ],
        )

        movement = await LotMovement.create(
            lot=lot,
            element_id=lot.element_id,
            quantity=quantity,
            from_status=origin,
            to_status=destination,
            cleaning_status_from=previous_cleaning,
            cleaning_status_to=cleaning,
            reason=reason,
            description=description,
            repair_cost=repair_cost,
            using_db=conn,
        )

    logger.info(
        "Lot %s: %s units %s -> %s (%s)",
        lot.lot_number, quantity, origin.value, destination.value, reason.value,
    )
    return MovementResult(movimiento=_to_movement_response(movement), lote=to_lot_response(lot))


async def rent_out(lot_id: int, quantity: int, description: Optional[str] = None) -> MovementResult:
    """Available units leave on rental."""
    return await apply_movement(
        lot_id,
        quantity,
        CurrentStatus.AVAILABLE,
        CurrentStatus.RENTED,
        CleaningStatus.GOOD,
        MovementReason.RENTED_OUT,
        description,
    )


async def process_return(
    lot_id: int,
    quantity: int,
    returned_as: Union[CleaningStatus, str],
    notes: Optional[str] = None,
    repair_cost: Optional[float] = None,
) -> MovementResult:
    """
    Rented units come back.

    Clean units become available, dirty ones go to cleaning and damaged
    ones to maintenance; units returned merely in good condition are
    cleaned too.
    """
    returned_as = _coerce(CleaningStatus, returned_as, "Estado de limpieza")
    destination, reason = return_route(returned_as)
    return await apply_movement(
        lot_id,
        quantity,
        CurrentStatus.RENTED,
        destination,
        returned_as,
        reason,
        notes,
        repair_cost,
    )


async def complete_cleaning(lot_id: int, quantity: int, notes: Optional[str] = None) -> MovementResult:
    return await apply_movement(
        lot_id,
        quantity,
        CurrentStatus.CLEANING,
        CurrentStatus.AVAILABLE,
        CleaningStatus.CLEAN,
        MovementReason.CLEANING_COMPLETED,
        notes,
    )


async def movement_history(element_id: int) -> List[MovementResponse]:
    """
    Lists every movement of every lot of an element, newest first.

    Args:
        element_id: The id of the element.

    Returns:
        The movements ordered by date, most recent first.
    """
    await _get_element_or_404(element_id)
    movements = await LotMovement.filter(element_id=element_id).order_by("-moved_at", "-id")
    return [_to_movement_response(m) for m in movements]


def list_reasons() -> List[ReasonInfo]:
    return [
        ReasonInfo(codigo=code, nombre=label, categoria=group)
        for code, (label, group) in MOVEMENT_REASONS.items()
    ]


def recommend(origin: Union[CurrentStatus, str], destination: Union[CurrentStatus, str]) -> TransitionRecommendation:
    """Suggested reason and cleaning status for a transition, and whether it is allowed."""
    origin = _coerce(CurrentStatus, origin, "Estado de origen")
    destination = _coerce(CurrentStatus, destination, "Estado de destino")
    allowed = is_valid_transition(origin, destination)
    return TransitionRecommendation(
        origen=origin,
        destino=destination,
        permitido=allowed,
        motivo=recommended_reason(origin, destination),
        cleaning_status=recommended_cleaning_status(destination),
        mensaje=None if allowed else invalid_transition_message(origin, destination),
    )


async def get_lot_dominant_status(lot_id: int) -> CurrentStatus:
    return dominant_status(await get_lot_distribution(lot_id))


async def element_distribution(element_id: int) -> Dict[CurrentStatus, int]:
    """Units per operational status across every lot of an element."""
    await _get_element_or_404(element_id)
    return summarize_lots(await Lot.filter(element_id=element_id))
