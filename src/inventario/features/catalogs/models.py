"""Reference catalogues an element can point at: materials and measurement units."""

from enum import Enum

from tortoise import fields, models


class UnitKind(str, Enum):
    LENGTH = "longitud"
    WEIGHT = "peso"
    VOLUME = "volumen"
    UNIT = "unidad"
    TIME = "tiempo"
    OTHER = "otro"


class Material(models.Model):
    id = fields.IntField(primary_key=True)
    name = fields.CharField(max_length=100, unique=True)

    elements: fields.ReverseRelation["Element"]

    def __str__(self):
        return self.name

    class Meta:
        table = "materials"
        ordering = ["name"]


class Unit(models.Model):
    id = fields.IntField(primary_key=True)
    name = fields.CharField(max_length=50, unique=True)
    abbreviation = fields.CharField(max_length=10, null=True)
    kind = fields.CharEnumField(UnitKind, max_length=20, default=UnitKind.UNIT)

    elements: fields.ReverseRelation["Element"]

    def __str__(self):
        return f"{self.name} ({self.abbreviation})" if self.abbreviation else self.name

    class Meta:
        table = "units"
        ordering = ["name"]
