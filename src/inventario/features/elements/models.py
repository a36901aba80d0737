"""Data models for inventory elements and their per-unit serials."""

import datetime
from enum import Enum

from tortoise import fields, models
from ...common.models import TimestampMixin


class ElementStatus(str, Enum):
    """Flat condition of a serial-tracked element or of a single serial."""

    NEW = "nuevo"
    GOOD = "bueno"
    MAINTENANCE = "mantenimiento"
    LOANED = "prestado"
    DAMAGED = "dañado"
    DEPLETED = "agotado"


class Element(TimestampMixin):
    id = fields.IntField(primary_key=True)
    name = fields.CharField(max_length=255)
    description = fields.TextField(null=True)
    quantity = fields.IntField(default=0)
    # Serial-tracked elements carry one Serial row per unit; the others carry Lots.
    requires_serials = fields.BooleanField(default=False)
    status = fields.CharEnumField(ElementStatus, max_length=20, default=ElementStatus.GOOD)
    location = fields.CharField(max_length=255, null=True)

    category: fields.ForeignKeyNullableRelation["Category"] = fields.ForeignKeyField(
        "models.Category",
        related_name="elements",
        on_delete=fields.RESTRICT,
        null=True,
    )
    material: fields.ForeignKeyNullableRelation["Material"] = fields.ForeignKeyField(
        "models.Material",
        related_name="elements",
        on_delete=fields.SET_NULL,
        null=True,
    )
    unit: fields.ForeignKeyNullableRelation["Unit"] = fields.ForeignKeyField(
        "models.Unit",
        related_name="elements",
        on_delete=fields.SET_NULL,
        null=True,
    )

    serials: fields.ReverseRelation["Serial"]
    lots: fields.ReverseRelation["Lot"]  # Defined in the lots feature

    def __str__(self):
        return f"{self.name} (Cantidad: {self.quantity})"

    class Meta:
        table = "elements"
        ordering = ["name", "id"]


def _today() -> datetime.date:
    return datetime.date.today()


class Serial(TimestampMixin):
    id = fields.IntField(primary_key=True)
    element: fields.ForeignKeyRelation[Element] = fields.ForeignKeyField(
        "models.Element", related_name="serials", on_delete=fields.CASCADE
    )
    serial_number = fields.CharField(max_length=100, unique=True)
    status = fields.CharEnumField(ElementStatus, max_length=20, default=ElementStatus.NEW)
    intake_date = fields.DateField(default=_today)
    location = fields.CharField(max_length=255, null=True)

    def __str__(self):
        return f"{self.serial_number} ({self.status.value})"

    class Meta:
        table = "serials"
        ordering = ["serial_number"]
