"""Data model for the category hierarchy."""

from tortoise import fields
from ...common.models import TimestampMixin


class Category(TimestampMixin):
    id = fields.IntField(primary_key=True)
    name = fields.CharField(max_length=100)
    description = fields.TextField(null=True)

    # A parent row cannot be removed while children still reference it;
    # deleting a subtree walks it children-first.
    parent: fields.ForeignKeyNullableRelation["Category"] = fields.ForeignKeyField(
        "models.Category",
        related_name="children",
        on_delete=fields.RESTRICT,
        null=True,
    )

    children: fields.ReverseRelation["Category"]
    elements: fields.ReverseRelation["Element"]  # Defined in the elements feature

    def __str__(self):
        return self.name

    class Meta:
        table = "categories"
        ordering = ["name", "id"]
