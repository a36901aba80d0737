"""Data models for lot-tracked stock: the bucketed Lot and its movement history."""

from typing import Dict

from tortoise import fields, models
from ...common.models import TimestampMixin, generate_ksuid
from .states import BUCKET_FIELDS, BUCKET_ORDER, CleaningStatus, CurrentStatus, MovementReason


class Lot(TimestampMixin):
    id = fields.IntField(primary_key=True)
    lot_number = fields.CharField(
        max_length=27, unique=True, default=generate_ksuid, db_index=True
    )

    element: fields.ForeignKeyRelation["Element"] = fields.ForeignKeyField(
        "models.Element", related_name="lots", on_delete=fields.CASCADE
    )

    # One bucket per operational status; together they hold every unit of the lot.
    available = fields.IntField(default=0)
    rented = fields.IntField(default=0)
    cleaning = fields.IntField(default=0)
    maintenance = fields.IntField(default=0)
    retired = fields.IntField(default=0)

    cleaning_status = fields.CharEnumField(
        CleaningStatus, max_length=20, default=CleaningStatus.GOOD
    )
    location = fields.CharField(max_length=255, null=True)

    movements: fields.ReverseRelation["LotMovement"]

    def bucket(self, status: CurrentStatus) -> int:
        return getattr(self, BUCKET_FIELDS[status])

    def set_bucket(self, status: CurrentStatus, quantity: int) -> None:
        setattr(self, BUCKET_FIELDS[status], quantity)

    def distribution(self) -> Dict[CurrentStatus, int]:
        return {status: self.bucket(status) for status in BUCKET_ORDER}

    @property
    def total(self) -> int:
        return sum(self.distribution().values())

    def __str__(self):
        return f"Lot {self.lot_number} ({self.total} units)"

    class Meta:
        table = "lots"
        ordering = ["id"]


class LotMovement(models.Model):  # Append-only history, no TimestampMixin
    id = fields.IntField(primary_key=True)
    public_id = fields.CharField(
        max_length=27, unique=True, default=generate_ksuid, db_index=True
    )

    lot: fields.ForeignKeyRelation[Lot] = fields.ForeignKeyField(
        "models.Lot", related_name="movements", on_delete=fields.CASCADE
    )
    # Denormalised so the history of an element spans all of its lots in one query.
    element: fields.ForeignKeyRelation["Element"] = fields.ForeignKeyField(
        "models.Element", related_name="lot_movements", on_delete=fields.CASCADE
    )

    quantity = fields.IntField()
    from_status = fields.CharEnumField(CurrentStatus, max_length=20)
    to_status = fields.CharEnumField(CurrentStatus, max_length=20)
    cleaning_status_from = fields.CharEnumField(CleaningStatus, max_length=20, null=True)
    cleaning_status_to = fields.CharEnumField(CleaningStatus, max_length=20)
    reason = fields.CharEnumField(MovementReason, max_length=30)
    description = fields.TextField(null=True)
    repair_cost = fields.FloatField(null=True)
    moved_at = fields.DatetimeField(auto_now_add=True)

    def __str__(self):
        return (
            f"{self.quantity} x {self.from_status.value} -> {self.to_status.value} "
            f"({self.reason.value}) at {self.moved_at}"
        )

    class Meta:
        table = "lot_movements"
        ordering = ["moved_at", "id"]
