import pytest

from inventario.common.exceptions import (
    InsufficientQuantityError,
    NotFoundError,
    ValidationError,
)
from inventario.features.elements.models import Element
from inventario.features.lots.models import Lot, LotMovement
from inventario.features.lots.schemas import LotCreate
from inventario.features.lots.service import (
    apply_movement,
    complete_cleaning,
    create_lot,
    element_distribution,
    get_lot_dominant_status,
    list_element_lots,
    list_reasons,
    movement_history,
    process_return,
    recommend,
    rent_out,
)
from inventario.features.lots.states import (
    ALLOWED_TRANSITIONS,
    CleaningStatus,
    CurrentStatus,
    MovementReason,
)

VALID_PAIRS = [
    (origin, destination)
    for origin, destinations in ALLOWED_TRANSITIONS.items()
    for destination in destinations
]
INVALID_PAIRS = [
    (origin, destination)
    for origin in CurrentStatus
    for destination in CurrentStatus
    if destination not in ALLOWED_TRANSITIONS[origin]
]


async def _lot_with(**buckets) -> Lot:
    element = await Element.create(name="Mantel", quantity=sum(buckets.values()))
    return await Lot.create(element=element, **buckets)


@pytest.mark.asyncio
async def test_rent_three_of_ten(lot_element):
    element, lot = lot_element
    result = await apply_movement(
        lot.id, 3, CurrentStatus.AVAILABLE, CurrentStatus.RENTED, CleaningStatus.GOOD, "RENTED_OUT"
    )

    await lot.refresh_from_db()
    assert lot.available == 7
    assert lot.rented == 3
    assert await LotMovement.filter(lot_id=lot.id).count() == 1
    assert result.movimiento.cantidad == 3
    assert result.movimiento.motivo == MovementReason.RENTED_OUT
    assert result.movimiento.elemento_id == element.id
    assert result.lote.distribucion[CurrentStatus.RENTED] == 3


@pytest.mark.asyncio
async def test_movement_larger_than_bucket_changes_nothing():
    lot = await _lot_with(available=2)
    with pytest.raises(InsufficientQuantityError) as exc_info:
        await apply_movement(lot.id, 5, CurrentStatus.AVAILABLE, CurrentStatus.RENTED, CleaningStatus.GOOD)
    assert exc_info.value.status_code == 409
    assert "Disponible: 2" in exc_info.value.message

    await lot.refresh_from_db()
    assert lot.available == 2
    assert lot.rented == 0
    assert await LotMovement.all().count() == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("destination", list(CurrentStatus))
async def test_retired_units_cannot_move(destination):
    lot = await _lot_with(retired=5)
    with pytest.raises(ValidationError):
        await apply_movement(lot.id, 1, CurrentStatus.RETIRED, destination, CleaningStatus.GOOD)
    await lot.refresh_from_db()
    assert lot.retired == 5


@pytest.mark.asyncio
@pytest.mark.parametrize("origin, destination", VALID_PAIRS)
async def test_every_allowed_transition_moves_units(origin, destination):
    buckets = {"available": 4, "rented": 4, "cleaning": 4, "maintenance": 4, "retired": 4}
    lot = await _lot_with(**buckets)
    before = lot.distribution()

    await apply_movement(lot.id, 3, origin, destination, CleaningStatus.GOOD)

    await lot.refresh_from_db()
    after = lot.distribution()
    assert after[origin] == before[origin] - 3
    assert after[destination] == before[destination] + 3
    assert sum(after.values()) == sum(before.values())


@pytest.mark.asyncio
@pytest.mark.parametrize("origin, destination", INVALID_PAIRS)
async def test_every_forbidden_transition_is_rejected(origin, destination):
    lot = await _lot_with(available=4, rented=4, cleaning=4, maintenance=4, retired=4)
    before = lot.distribution()

    with pytest.raises(ValidationError):
        await apply_movement(lot.id, 1, origin, destination, CleaningStatus.GOOD)

    await lot.refresh_from_db()
    assert lot.distribution() == before


@pytest.mark.asyncio
async def test_non_positive_quantity(lot_element):
    _, lot = lot_element
    with pytest.raises(ValidationError):
        await apply_movement(lot.id, 0, CurrentStatus.AVAILABLE, CurrentStatus.RENTED, CleaningStatus.GOOD)


@pytest.mark.asyncio
async def test_unknown_status_values(lot_element):
    _, lot = lot_element
    with pytest.raises(ValidationError):
        await apply_movement(lot.id, 1, "AVAILABLE", "LOST_IN_SPACE", "GOOD")
    with pytest.raises(ValidationError):
        await apply_movement(lot.id, 1, "AVAILABLE", "RENTED", "SPARKLING")


@pytest.mark.asyncio
async def test_missing_lot():
    with pytest.raises(NotFoundError):
        await apply_movement(999, 1, CurrentStatus.AVAILABLE, CurrentStatus.RENTED, CleaningStatus.GOOD)


@pytest.mark.asyncio
async def test_reason_defaults_to_recommendation(lot_element):
    _, lot = lot_element
    result = await apply_movement(lot.id, 1, "AVAILABLE", "MAINTENANCE", "DAMAGED")
    assert result.movimiento.motivo == MovementReason.DAMAGED_IN_USE
    assert result.lote.cleaning_status == CleaningStatus.DAMAGED


@pytest.mark.asyncio
async def test_rent_return_and_clean_cycle(lot_element):
    element, lot = lot_element
    await rent_out(lot.id, 6)
    await process_return(lot.id, 4, CleaningStatus.DIRTY, notes="Manchas de vino")
    await process_return(lot.id, 1, CleaningStatus.DAMAGED, repair_cost=25.5)
    result = await complete_cleaning(lot.id, 4)

    distribution = result.lote.distribucion
    assert distribution[CurrentStatus.AVAILABLE] == 8
    assert distribution[CurrentStatus.RENTED] == 1
    assert distribution[CurrentStatus.CLEANING] == 0
    assert distribution[CurrentStatus.MAINTENANCE] == 1

    history = await movement_history(element.id)
    assert [m.motivo for m in history] == [
        MovementReason.CLEANING_COMPLETED,
        MovementReason.RETURNED_DAMAGED,
        MovementReason.RETURNED_DIRTY,
        MovementReason.RENTED_OUT,
    ]
    assert history[1].costo_reparacion == 25.5


@pytest.mark.asyncio
async def test_history_missing_element():
    with pytest.raises(NotFoundError):
        await movement_history(999)


@pytest.mark.asyncio
async def test_create_lot_adds_units(lot_element):
    element, _ = lot_element
    lot = await create_lot(element.id, LotCreate(cantidad=5, ubicacion="Bodega 2"))
    assert lot.distribucion[CurrentStatus.AVAILABLE] == 5

    await element.refresh_from_db()
    assert element.quantity == 15
    assert len(await list_element_lots(element.id)) == 2
    assert (await element_distribution(element.id))[CurrentStatus.AVAILABLE] == 15


@pytest.mark.asyncio
async def test_create_lot_for_serial_element(serial_element):
    with pytest.raises(ValidationError):
        await create_lot(serial_element.id, LotCreate(cantidad=1))


@pytest.mark.asyncio
async def test_dominant_status_of_lot():
    lot = await _lot_with(available=2, rented=6, cleaning=1)
    assert await get_lot_dominant_status(lot.id) == CurrentStatus.RENTED


def test_reason_catalogue():
    reasons = list_reasons()
    assert len(reasons) == len(MovementReason)
    rented = next(r for r in reasons if r.codigo == MovementReason.RENTED_OUT)
    assert rented.nombre == "Alquilado"


def test_recommend_forbidden_transition():
    recommendation = recommend("CLEANING", "RENTED")
    assert recommendation.permitido is False
    assert "En Limpieza" in recommendation.mensaje
