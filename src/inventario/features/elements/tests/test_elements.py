import datetime

import pytest

from inventario.common.exceptions import (
    ConflictError,
    InsufficientQuantityError,
    NotFoundError,
    ValidationError,
)
from inventario.features.categories.models import Category
from inventario.features.elements.models import Element, Serial
from inventario.features.elements.schemas import (
    ElementCreate,
    ElementUpdate,
    LotTrackedElementResponse,
    SerialIn,
    SerialTrackedElementResponse,
)
from inventario.features.elements.service import (
    create_element,
    delete_element,
    get_element,
    list_category_elements,
    list_elements,
    update_element,
)
from inventario.features.lots.models import Lot, LotMovement
from inventario.features.lots.service import rent_out
from inventario.features.lots.states import CleaningStatus, CurrentStatus


def _serials(*numbers):
    return [SerialIn(numero_serie=n) for n in numbers]


@pytest.mark.asyncio
async def test_create_serial_tracked_element():
    element = await create_element(
        ElementCreate(nombre="Proyector", cantidad=2, requiere_series=True, series=_serials("A1", "A2"))
    )
    assert isinstance(element, SerialTrackedElementResponse)
    assert element.cantidad == 2
    assert [s.numero_serie for s in element.series] == ["A1", "A2"]
    assert await Lot.filter(element_id=element.id).count() == 0


@pytest.mark.asyncio
async def test_serial_count_must_match_quantity():
    with pytest.raises(ValidationError) as exc_info:
        await create_element(
            ElementCreate(nombre="Proyector", cantidad=3, requiere_series=True, series=_serials("A1", "A2"))
        )
    assert "(3)" in exc_info.value.message
    assert "(2)" in exc_info.value.message
    assert await Element.all().count() == 0


@pytest.mark.asyncio
async def test_serial_number_must_not_be_empty():
    with pytest.raises(ValidationError) as exc_info:
        await create_element(
            ElementCreate(nombre="Proyector", cantidad=2, requiere_series=True, series=_serials("A1", "  "))
        )
    assert "posición 2" in exc_info.value.message


@pytest.mark.asyncio
async def test_duplicate_serials_in_payload_are_rejected():
    with pytest.raises(ValidationError):
        await create_element(
            ElementCreate(nombre="Proyector", cantidad=2, requiere_series=True, series=_serials("ab-1", "AB-1"))
        )


@pytest.mark.asyncio
async def test_serial_already_stored_is_conflict(serial_element):
    with pytest.raises(ConflictError) as exc_info:
        await create_element(
            ElementCreate(nombre="Otro proyector", cantidad=1, requiere_series=True, series=_serials("PX-001"))
        )
    assert exc_info.value.status_code == 409
    # The failed element was rolled back with its transaction
    assert await Element.filter(name="Otro proyector").count() == 0


@pytest.mark.asyncio
async def test_create_lot_tracked_element_opens_initial_lot():
    element = await create_element(
        ElementCreate(nombre="Silla", cantidad=50, ubicacion="Bodega 1", series=_serials("ignored"))
    )
    assert isinstance(element, LotTrackedElementResponse)
    assert element.ubicacion == "Bodega 1"
    assert len(element.lotes) == 1
    lot = element.lotes[0]
    assert lot.distribucion[CurrentStatus.AVAILABLE] == 50
    assert lot.cantidad_total == 50
    assert lot.cleaning_status == CleaningStatus.GOOD
    assert element.estado_dominante == CurrentStatus.AVAILABLE
    assert await Serial.all().count() == 0


@pytest.mark.asyncio
async def test_create_element_with_missing_category():
    with pytest.raises(NotFoundError):
        await create_element(ElementCreate(nombre="Mesa", cantidad=1, categoria_id=999))


@pytest.mark.asyncio
async def test_get_element_not_found():
    with pytest.raises(NotFoundError):
        await get_element(404)


@pytest.mark.asyncio
async def test_list_elements_by_category_and_subcategories():
    parent = await Category.create(name="Mobiliario")
    child = await Category.create(name="Sillas", parent=parent)
    await Element.create(name="Mesa", quantity=1, category=parent)
    await Element.create(name="Silla", quantity=1, category=child)
    await Element.create(name="Foco", quantity=1)

    assert len(await list_elements()) == 3
    assert [e.nombre for e in await list_elements(parent.id)] == ["Mesa"]
    assert [e.nombre for e in await list_elements(parent.id, include_subcategories=True)] == ["Mesa", "Silla"]
    assert [e.nombre for e in await list_category_elements(parent.id)] == ["Mesa", "Silla"]
    summary = (await list_elements(child.id))[0]
    assert summary.categoria_nombre == "Sillas"


@pytest.mark.asyncio
async def test_tracking_mode_cannot_change(lot_element):
    element, _ = lot_element
    with pytest.raises(ValidationError):
        await update_element(element.id, ElementUpdate(requiere_series=True))


@pytest.mark.asyncio
async def test_update_lot_element_quantity_adjusts_available(lot_element):
    element, lot = lot_element
    updated = await update_element(element.id, ElementUpdate(cantidad=15, nombre="Silla blanca"))
    assert updated.cantidad == 15
    assert updated.nombre == "Silla blanca"
    await lot.refresh_from_db()
    assert lot.available == 15


@pytest.mark.asyncio
async def test_update_lot_element_cannot_remove_rented_units(lot_element):
    element, lot = lot_element
    await rent_out(lot.id, 8)
    with pytest.raises(InsufficientQuantityError):
        await update_element(element.id, ElementUpdate(cantidad=5))
    await element.refresh_from_db()
    assert element.quantity == 10


@pytest.mark.asyncio
async def test_update_serial_element_replaces_serials(serial_element):
    updated = await update_element(
        serial_element.id, ElementUpdate(series=_serials("PX-100", "PX-101", "PX-102"))
    )
    assert updated.cantidad == 3
    assert [s.numero_serie for s in updated.series] == ["PX-100", "PX-101", "PX-102"]
    assert not await Serial.filter(serial_number="PX-001").exists()


@pytest.mark.asyncio
async def test_update_serial_element_quantity_must_match(serial_element):
    with pytest.raises(ValidationError):
        await update_element(serial_element.id, ElementUpdate(cantidad=5))
    with pytest.raises(ValidationError):
        await update_element(serial_element.id, ElementUpdate(cantidad=1, series=_serials("X", "Y")))


@pytest.mark.asyncio
async def test_update_without_fields(lot_element):
    element, _ = lot_element
    with pytest.raises(ValidationError):
        await update_element(element.id, ElementUpdate())


@pytest.mark.asyncio
async def test_delete_element_removes_lots_and_history(lot_element):
    element, lot = lot_element
    await rent_out(lot.id, 2)
    await delete_element(element.id)
    assert not await Element.filter(id=element.id).exists()
    assert await Lot.all().count() == 0
    assert await LotMovement.all().count() == 0


@pytest.mark.asyncio
async def test_delete_serial_element(serial_element):
    await delete_element(serial_element.id)
    assert await Serial.all().count() == 0


@pytest.mark.asyncio
async def test_quantity_update_touches_lot_timestamp(lot_element):
    element, lot = lot_element
    await Lot.filter(id=lot.id).update(updated_at=datetime.datetime(2000, 1, 1))

    await update_element(element.id, ElementUpdate(cantidad=12))

    await lot.refresh_from_db()
    assert lot.available == 12
    assert lot.updated_at.year != 2000
