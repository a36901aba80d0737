import datetime
import logging
from typing import List, Optional, Sequence

from tortoise.exceptions import IntegrityError
from tortoise.transactions import in_transaction

from ...common.exceptions import (
    ConflictError,
    InsufficientQuantityError,
    NotFoundError,
    ValidationError,
)
from ..catalogs.models import Material, Unit
from ..categories.models import Category
from ..categories.service import collect_subtree_ids
from ..lots.models import Lot, LotMovement
from ..lots.service import summarize_lots, to_lot_response
from ..lots.states import CleaningStatus, dominant_status
from .models import Element, Serial
from .schemas import (
    ElementCreate,
    ElementDetail,
    ElementSummary,
    ElementUpdate,
    LotTrackedElementResponse,
    SerialCreate,
    SerialIn,
    SerialResponse,
    SerialTrackedElementResponse,
    SerialUpdate,
)

logger = logging.getLogger(__name__)

RELATED_FIELDS = ("category", "material", "unit")


def _to_serial_response(serial: Serial) -> SerialResponse:
    return SerialResponse(
        id=serial.id,
        elemento_id=serial.element_id,
        numero_serie=serial.serial_number,
        estado=serial.status,
        fecha_ingreso=serial.intake_date,
        ubicacion=serial.location,
    )


def _common_fields(element: Element) -> dict:
    """Fields shared by every element representation; relations must be fetched."""
    return dict(
        id=element.id,
        nombre=element.name,
        descripcion=element.description,
        cantidad=element.quantity,
        categoria_id=element.category_id,
        categoria_nombre=element.category.name if element.category else None,
        material_id=element.material_id,
        material_nombre=element.material.name if element.material else None,
        unidad_id=element.unit_id,
        unidad_nombre=element.unit.name if element.unit else None,
        created_at=element.created_at,
        updated_at=element.updated_at,
    )


def to_element_summary(element: Element) -> ElementSummary:
    """Converts an Element (with category, material and unit fetched) to an ElementSummary."""
    return ElementSummary(
        **_common_fields(element),
        requiere_series=element.requires_serials,
        estado=element.status,
        ubicacion=element.location,
    )


async def _to_element_detail(element: Element) -> ElementDetail:
    """Builds the serial-tracked or the lot-tracked view of an element."""
    await element.fetch_related(*RELATED_FIELDS)
    if element.requires_serials:
        serials = await Serial.filter(element_id=element.id).order_by("serial_number")
        return SerialTrackedElementResponse(
            **_common_fields(element),
            estado=element.status,
            series=[_to_serial_response(s) for s in serials],
        )

    lots = await Lot.filter(element_id=element.id).order_by("id")
    distribution = summarize_lots(lots)
    return LotTrackedElementResponse(
        **_common_fields(element),
        ubicacion=element.location,
        lotes=[to_lot_response(lot) for lot in lots],
        distribucion=distribution,
        estado_dominante=dominant_status(distribution),
    )


async def _get_element_or_404(element_id: int, using_db=None) -> Element:
    element = await Element.get_or_none(id=element_id, using_db=using_db)
    if not element:
        raise NotFoundError(f"Elemento {element_id} no encontrado")
    return element


async def _ensure_references(
    category_id: Optional[int], material_id: Optional[int], unit_id: Optional[int]
) -> None:
    """Raises NotFoundError if a referenced category, material or unit is absent."""
    if category_id is not None and not await Category.exists(id=category_id):
        raise NotFoundError(f"Categoría {category_id} no encontrada")
    if material_id is not None and not await Material.exists(id=material_id):
        raise NotFoundError(f"Material {material_id} no encontrado")
    if unit_id is not None and not await Unit.exists(id=unit_id):
        raise NotFoundError(f"Unidad {unit_id} no encontrada")


def _validate_serials(series: Sequence[SerialIn], quantity: int) -> None:
    """Checks a serial list against the element quantity before anything is written."""
    if len(series) != quantity:
        raise ValidationError(
            f"La cantidad ({quantity}) debe coincidir con el número de series "
            f"proporcionadas ({len(series)})"
        )
    for position, serial in enumerate(series, start=1):
        if not serial.numero_serie or not serial.numero_serie.strip():
            raise ValidationError(
                f"La serie en posición {position} requiere un número de serie válido"
            )
    normalized = {serial.numero_serie.strip().lower() for serial in series}
    if len(normalized) != len(series):
        raise ValidationError("Los números de serie deben ser únicos dentro del elemento")


async def _create_serials(element: Element, series: Sequence[SerialIn], conn) -> None:
    for serial in series:
        await Serial.create(
            element=element,
            serial_number=serial.numero_serie.strip(),
            status=serial.estado,
            intake_date=serial.fecha_ingreso or datetime.date.today(),
            location=serial.ubicacion,
            using_db=conn,
        )


async def create_element(element_in: ElementCreate) -> ElementDetail:
    """
    Creates an element.

    A serial-tracked element must come with exactly ``cantidad`` serials, all
    non-empty and distinct. An element without serials ignores any serial list
    and starts with a single lot holding every unit as available.

    Args:
        element_in: The data for the new element.

    Returns:
        The created element, in its serial-tracked or lot-tracked form.
    """
    name = element_in.nombre.strip()
    if not name:
        raise ValidationError("El nombre es obligatorio")
    if element_in.requiere_series:
        _validate_serials(element_in.series, element_in.cantidad)
    await _ensure_references(
        element_in.categoria_id, element_in.material_id, element_in.unidad_id
    )

    try:
        async with in_transaction() as conn:
            element = await Element.create(
                name=name,
                description=element_in.descripcion.strip() if element_in.descripcion else None,
                quantity=element_in.cantidad,
                requires_serials=element_in.requiere_series,
                status=element_in.estado,
                location=None if element_in.requiere_series else element_in.ubicacion,
                category_id=element_in.categoria_id,
                material_id=element_in.material_id,
                unit_id=element_in.unidad_id,
                using_db=conn,
            )
            if element_in.requiere_series:
                await _create_serials(element, element_in.series, conn)
            else:
                await Lot.create(
                    element=element,
                    available=element_in.cantidad,
                    cleaning_status=CleaningStatus.GOOD,
                    location=element_in.ubicacion,
                    using_db=conn,
                )
    except IntegrityError as e:
        logger.error(f"Error creating element: {e}", exc_info=True)
        raise ConflictError("Uno o más números de serie ya están registrados")

    logger.info(
        "Element %s created (%s units, serials=%s)",
        element.id, element.quantity, element.requires_serials,
    )
    return await _to_element_detail(element)


async def list_elements(
    category_id: Optional[int] = None, include_subcategories: bool = False
) -> List[ElementSummary]:
    """
    Lists elements, optionally restricted to a category.

    Args:
        category_id: Only elements attached to this category.
        include_subcategories: Also include elements attached to any
            descendant of ``category_id``.

    Returns:
        The elements ordered by name.
    """
    query = Element.all()
    if category_id is not None:
        if not await Category.exists(id=category_id):
            raise NotFoundError(f"Categoría {category_id} no encontrada")
        if include_subcategories:
            query = query.filter(category_id__in=await collect_subtree_ids(category_id))
        else:
            query = query.filter(category_id=category_id)
    elements = await query.prefetch_related(*RELATED_FIELDS).order_by("name", "id")
    return [to_element_summary(element) for element in elements]


async def get_element(element_id: int) -> ElementDetail:
    """
    Gets an element with its serials or its lots.

    Args:
        element_id: The id of the element.

    Returns:
        The serial-tracked or lot-tracked view of the element.
    """
    return await _to_element_detail(await _get_element_or_404(element_id))


async def _adjust_lot_quantity(element: Element, delta: int, conn) -> None:
    """Adds ``delta`` units to (or removes them from) the available bucket of the first lot."""
    lot = (
        await Lot.filter(element_id=element.id)
        .using_db(conn)
        .select_for_update()
        .order_by("id")
        .first()
    )
    if lot is None:
        if delta < 0:
            raise InsufficientQuantityError(
                f"Cantidad insuficiente. Disponible: 0, Solicitado: {-delta}"
            )
        await Lot.create(element=element, available=delta, location=element.location, using_db=conn)
        return
    if lot.available + delta < 0:
        raise InsufficientQuantityError(
            f"Cantidad insuficiente. Disponible: {lot.available}, Solicitado: {-delta}"
        )
    lot.available += delta
    await lot.save(using_db=conn, update_fields=["available", "updated_at"])


async def update_element(element_id: int, element_in: ElementUpdate) -> ElementDetail:
    """
    Updates an element.

    The tracking mode cannot change. For serial-tracked elements a ``series``
    list replaces every stored serial and must match the resulting quantity;
    for lot-tracked elements a new ``cantidad`` adds or removes available
    units of the first lot.

    Args:
        element_id: The id of the element to update.
        element_in: The fields to change.

    Returns:
        The updated element.
    """
    element = await _get_element_or_404(element_id)
    update_data = element_in.model_dump(exclude_unset=True)
    if not update_data:
        raise ValidationError("No hay campos para actualizar")

    requires_serials = update_data.pop("requiere_series", None)
    if requires_serials is not None and requires_serials != element.requires_serials:
        raise ValidationError(
            "No se puede cambiar el tipo de seguimiento (con o sin series) de un elemento existente"
        )

    if "nombre" in update_data:
        if not update_data["nombre"] or not update_data["nombre"].strip():
            raise ValidationError("El nombre no puede estar vacío")
        element.name = update_data["nombre"].strip()
    if "descripcion" in update_data:
        element.description = update_data["descripcion"]
    if update_data.get("estado") is not None:
        element.status = update_data["estado"]
    if "ubicacion" in update_data and not element.requires_serials:
        element.location = update_data["ubicacion"]

    await _ensure_references(
        update_data.get("categoria_id"), update_data.get("material_id"), update_data.get("unidad_id")
    )
    if "categoria_id" in update_data:
        element.category_id = update_data["categoria_id"]
    if "material_id" in update_data:
        element.material_id = update_data["material_id"]
    if "unidad_id" in update_data:
        element.unit_id = update_data["unidad_id"]

    new_quantity = update_data.get("cantidad")
    series = element_in.series if element.requires_serials else None
    if element.requires_serials:
        if series is not None:
            new_quantity = len(series) if new_quantity is None else new_quantity
            _validate_serials(series, new_quantity)
        elif new_quantity is not None and new_quantity != element.quantity:
            registered = await Serial.filter(element_id=element.id).count()
            if new_quantity != registered:
                raise ValidationError(
                    f"La cantidad ({new_quantity}) debe coincidir con el número de series "
                    f"registradas ({registered})"
                )

    try:
        async with in_transaction() as conn:
            if new_quantity is not None and new_quantity != element.quantity:
                if not element.requires_serials:
                    await _adjust_lot_quantity(element, new_quantity - element.quantity, conn)
                element.quantity = new_quantity
            if series is not None:
                await Serial.filter(element_id=element.id).using_db(conn).delete()
                await _create_serials(element, series, conn)
            await element.save(using_db=conn)
    except IntegrityError as e:
        logger.error(f"Error updating element {element_id}: {e}", exc_info=True)
        raise ConflictError("Uno o más números de serie ya están registrados")

    logger.info("Element %s updated", element.id)
    return await _to_element_detail(element)


async def delete_element(element_id: int) -> None:
    """
    Deletes an element together with its serials, lots and movement history.

    Args:
        element_id: The id of the element to delete.
    """
    async with in_transaction() as conn:
        element = await _get_element_or_404(element_id, using_db=conn)
        await LotMovement.filter(element_id=element.id).using_db(conn).delete()
        await Lot.filter(element_id=element.id).using_db(conn).delete()
        await Serial.filter(element_id=element.id).using_db(conn).delete()
        await element.delete(using_db=conn)
    logger.info("Element %s deleted", element_id)


# --- Serials ---
async def _get_serial_or_404(serial_id: int, using_db=None) -> Serial:
    serial = await Serial.get_or_none(id=serial_id, using_db=using_db)
    if not serial:
        raise NotFoundError(f"Serie {serial_id} no encontrada")
    return serial


async def list_serials(element_id: int) -> List[SerialResponse]:
    await _get_element_or_404(element_id)
    serials = await Serial.filter(element_id=element_id).order_by("serial_number")
    return [_to_serial_response(s) for s in serials]


async def get_serial(serial_id: int) -> SerialResponse:
    return _to_serial_response(await _get_serial_or_404(serial_id))


async def create_serial(serial_in: SerialCreate) -> SerialResponse:
    """
    Registers one more unit of a serial-tracked element.

    The element quantity grows by one in the same transaction.

    Args:
        serial_in: The serial to add.

    Returns:
        The created serial.
    """
    serial_number = serial_in.numero_serie.strip()
    if not serial_number:
        raise ValidationError("El número de serie es obligatorio")

    try:
        async with in_transaction() as conn:
            element = await Element.get_or_none(
                id=serial_in.elemento_id, using_db=conn
            ).select_for_update()
            if not element:
                raise NotFoundError(f"Elemento {serial_in.elemento_id} no encontrado")
            if not element.requires_serials:
                raise ValidationError(
                    f"El elemento {element.id} no se controla por números de serie"
                )
            serial = await Serial.create(
                element=element,
                serial_number=serial_number,
                status=serial_in.estado,
                intake_date=serial_in.fecha_ingreso or datetime.date.today(),
                location=serial_in.ubicacion,
                using_db=conn,
            )
            element.quantity += 1
            await element.save(using_db=conn, update_fields=["quantity"])
    except IntegrityError as e:
        logger.error(f"Error creating serial: {e}", exc_info=True)
        raise ConflictError(f"El número de serie '{serial_number}' ya existe")

    logger.info("Serial %s added to element %s", serial.serial_number, element.id)
    return _to_serial_response(serial)


async def update_serial(serial_id: int, serial_in: SerialUpdate) -> SerialResponse:
    serial = await _get_serial_or_404(serial_id)
    update_data = serial_in.model_dump(exclude_unset=True)
    if not update_data:
        raise ValidationError("No hay campos para actualizar")

    if update_data.get("numero_serie") is not None:
        serial.serial_number = update_data["numero_serie"].strip()
        if not serial.serial_number:
            raise ValidationError("El número de serie es obligatorio")
    if update_data.get("estado") is not None:
        serial.status = update_data["estado"]
    if update_data.get("fecha_ingreso") is not None:
        serial.intake_date = update_data["fecha_ingreso"]
    if "ubicacion" in update_data:
        serial.location = update_data["ubicacion"]

    try:
        await serial.save()
    except IntegrityError as e:
        logger.error(f"Error updating serial {serial_id}: {e}", exc_info=True)
        raise ConflictError(f"El número de serie '{serial.serial_number}' ya existe")
    return _to_serial_response(serial)


async def delete_serial(serial_id: int) -> None:
    """Deletes a serial; the element loses one unit."""
    async with in_transaction() as conn:
        serial = await _get_serial_or_404(serial_id, using_db=conn)
        element = await Element.get(id=serial.element_id, using_db=conn).select_for_update()
        await serial.delete(using_db=conn)
        element.quantity = max(element.quantity - 1, 0)
        await element.save(using_db=conn, update_fields=["quantity"])
    logger.info("Serial %s deleted from element %s", serial_id, element.id)


async def list_category_elements(category_id: int) -> List[ElementSummary]:
    """Elements attached to a category or to any of its descendants."""
    return await list_elements(category_id, include_subcategories=True)
