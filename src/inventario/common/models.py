"""Common database models for the application.

This module contains the shared pieces every feature builds its models on:
a TimestampMixin providing created_at and updated_at fields, and a helper
generating KSUIDs (K-Sortable Unique IDentifiers). KSUIDs are used as lot
numbers and as public identifiers of movement records, so that both sort
chronologically."""

from tortoise import fields, models
from ksuid import ksuid


def generate_ksuid():
    """Generate a K-Sortable Unique IDentifier (KSUID).

    KSUIDs are timestamp prefixed, URL-safe and sortable chronologically,
    which makes them convenient as human-facing lot numbers.

    Returns:
        str: A string representation of the generated KSUID.
    """
    return str(ksuid.Ksuid())


class TimestampMixin(models.Model):
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        abstract = True
