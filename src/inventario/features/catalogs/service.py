import logging
from typing import List

from tortoise.exceptions import IntegrityError

from ...common.exceptions import ConflictError, ValidationError
from .models import Material, Unit
from .schemas import MaterialCreate, MaterialResponse, UnitCreate, UnitResponse

logger = logging.getLogger(__name__)


def _to_material_response(material: Material) -> MaterialResponse:
    return MaterialResponse(id=material.id, nombre=material.name)


def _to_unit_response(unit: Unit) -> UnitResponse:
    return UnitResponse(
        id=unit.id, nombre=unit.name, abreviatura=unit.abbreviation, tipo=unit.kind
    )


async def list_materials() -> List[MaterialResponse]:
    return [_to_material_response(m) for m in await Material.all().order_by("name")]


async def create_material(material_in: MaterialCreate) -> MaterialResponse:
    name = material_in.nombre.strip()
    if not name:
        raise ValidationError("El nombre del material es obligatorio")
    try:
        material = await Material.create(name=name)
    except IntegrityError as e:
        logger.error(f"Error creating material: {e}", exc_info=True)
        raise ConflictError(f"El material '{name}' ya existe")
    logger.info("Material %s created", material.id)
    return _to_material_response(material)


async def list_units() -> List[UnitResponse]:
    return [_to_unit_response(u) for u in await Unit.all().order_by("name")]


async def create_unit(unit_in: UnitCreate) -> UnitResponse:
    name = unit_in.nombre.strip()
    if not name:
        raise ValidationError("El nombre de la unidad es obligatorio")
    try:
        unit = await Unit.create(name=name, abbreviation=unit_in.abreviatura, kind=unit_in.tipo)
    except IntegrityError as e:
        logger.error(f"Error creating unit: {e}", exc_info=True)
        raise ConflictError(f"La unidad '{name}' ya existe")
    logger.info("Unit %s created", unit.id)
    return _to_unit_response(unit)
