"""Operational and cleaning states of lot-tracked units.

A lot splits the units of one element into five buckets, one per operational
status. Units move between buckets only along ``ALLOWED_TRANSITIONS``;
``RETIRED`` is terminal. Everything in this module is pure: the service layer
applies the result to the database.
"""

from enum import Enum
from typing import Dict, Mapping, Tuple


class CurrentStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    RENTED = "RENTED"
    CLEANING = "CLEANING"
    MAINTENANCE = "MAINTENANCE"
    RETIRED = "RETIRED"


class CleaningStatus(str, Enum):
    CLEAN = "CLEAN"
    GOOD = "GOOD"
    DIRTY = "DIRTY"
    VERY_DIRTY = "VERY_DIRTY"
    DAMAGED = "DAMAGED"


class MovementReason(str, Enum):
    MANUAL_ADJUSTMENT = "MANUAL_ADJUSTMENT"
    CLEANING_COMPLETED = "CLEANING_COMPLETED"
    REPAIR_COMPLETED = "REPAIR_COMPLETED"
    DAMAGED_IN_USE = "DAMAGED_IN_USE"
    DISCARDED = "DISCARDED"
    LOST = "LOST"
    RENTED_OUT = "RENTED_OUT"
    RETURNED_CLEAN = "RETURNED_CLEAN"
    RETURNED_DIRTY = "RETURNED_DIRTY"
    RETURNED_DAMAGED = "RETURNED_DAMAGED"


# Fixed enumeration order of the buckets; ties in dominant_status go to the first.
BUCKET_ORDER: Tuple[CurrentStatus, ...] = (
    CurrentStatus.AVAILABLE,
    CurrentStatus.RENTED,
    CurrentStatus.CLEANING,
    CurrentStatus.MAINTENANCE,
    CurrentStatus.RETIRED,
)

# Lot column holding the units of each status.
BUCKET_FIELDS: Dict[CurrentStatus, str] = {
    CurrentStatus.AVAILABLE: "available",
    CurrentStatus.RENTED: "rented",
    CurrentStatus.CLEANING: "cleaning",
    CurrentStatus.MAINTENANCE: "maintenance",
    CurrentStatus.RETIRED: "retired",
}

ALLOWED_TRANSITIONS: Dict[CurrentStatus, Tuple[CurrentStatus, ...]] = {
    CurrentStatus.AVAILABLE: (
        CurrentStatus.RENTED,
        CurrentStatus.CLEANING,
        CurrentStatus.MAINTENANCE,
        CurrentStatus.RETIRED,
    ),
    CurrentStatus.RENTED: (
        CurrentStatus.AVAILABLE,
        CurrentStatus.CLEANING,
        CurrentStatus.MAINTENANCE,
        CurrentStatus.RETIRED,
    ),
    CurrentStatus.CLEANING: (CurrentStatus.AVAILABLE, CurrentStatus.MAINTENANCE),
    CurrentStatus.MAINTENANCE: (CurrentStatus.AVAILABLE, CurrentStatus.RETIRED),
    CurrentStatus.RETIRED: (),
}

CURRENT_STATUS_LABELS: Dict[CurrentStatus, str] = {
    CurrentStatus.AVAILABLE: "Disponible",
    CurrentStatus.RENTED: "Alquilado",
    CurrentStatus.CLEANING: "En Limpieza",
    CurrentStatus.MAINTENANCE: "Mantenimiento",
    CurrentStatus.RETIRED: "Retirado",
}

# code -> (label, group)
MOVEMENT_REASONS: Dict[MovementReason, Tuple[str, str]] = {
    MovementReason.MANUAL_ADJUSTMENT: ("Ajuste manual", "ajuste"),
    MovementReason.CLEANING_COMPLETED: ("Limpieza completada", "limpieza"),
    MovementReason.REPAIR_COMPLETED: ("Reparación completada", "mantenimiento"),
    MovementReason.DAMAGED_IN_USE: ("Dañado en uso", "mantenimiento"),
    MovementReason.DISCARDED: ("Descartado", "baja"),
    MovementReason.LOST: ("Perdido", "baja"),
    MovementReason.RENTED_OUT: ("Alquilado", "alquiler"),
    MovementReason.RETURNED_CLEAN: ("Devuelto limpio", "alquiler"),
    MovementReason.RETURNED_DIRTY: ("Devuelto sucio", "alquiler"),
    MovementReason.RETURNED_DAMAGED: ("Devuelto dañado", "alquiler"),
}

_RECOMMENDED_REASONS: Dict[Tuple[CurrentStatus, CurrentStatus], MovementReason] = {
    (CurrentStatus.AVAILABLE, CurrentStatus.RENTED): MovementReason.RENTED_OUT,
    (CurrentStatus.RENTED, CurrentStatus.AVAILABLE): MovementReason.RETURNED_CLEAN,
    (CurrentStatus.RENTED, CurrentStatus.CLEANING): MovementReason.RETURNED_DIRTY,
    (CurrentStatus.RENTED, CurrentStatus.MAINTENANCE): MovementReason.RETURNED_DAMAGED,
    (CurrentStatus.CLEANING, CurrentStatus.AVAILABLE): MovementReason.CLEANING_COMPLETED,
    (CurrentStatus.MAINTENANCE, CurrentStatus.AVAILABLE): MovementReason.REPAIR_COMPLETED,
    (CurrentStatus.AVAILABLE, CurrentStatus.MAINTENANCE): MovementReason.DAMAGED_IN_USE,
    (CurrentStatus.MAINTENANCE, CurrentStatus.RETIRED): MovementReason.DISCARDED,
    (CurrentStatus.AVAILABLE, CurrentStatus.RETIRED): MovementReason.LOST,
    (CurrentStatus.RENTED, CurrentStatus.RETIRED): MovementReason.LOST,
}

_RECOMMENDED_CLEANING: Dict[CurrentStatus, CleaningStatus] = {
    CurrentStatus.AVAILABLE: CleaningStatus.CLEAN,
    CurrentStatus.RENTED: CleaningStatus.GOOD,
    CurrentStatus.CLEANING: CleaningStatus.DIRTY,
    CurrentStatus.MAINTENANCE: CleaningStatus.DAMAGED,
    CurrentStatus.RETIRED: CleaningStatus.DAMAGED,
}

# Where rented units go when they come back, by the condition they come back in.
_RETURN_ROUTES: Dict[CleaningStatus, Tuple[CurrentStatus, MovementReason]] = {
    CleaningStatus.CLEAN: (CurrentStatus.AVAILABLE, MovementReason.RETURNED_CLEAN),
    CleaningStatus.DIRTY: (CurrentStatus.CLEANING, MovementReason.RETURNED_DIRTY),
    CleaningStatus.VERY_DIRTY: (CurrentStatus.CLEANING, MovementReason.RETURNED_DIRTY),
    CleaningStatus.DAMAGED: (CurrentStatus.MAINTENANCE, MovementReason.RETURNED_DAMAGED),
}


def is_valid_transition(origin: CurrentStatus, destination: CurrentStatus) -> bool:
    return destination in ALLOWED_TRANSITIONS.get(origin, ())


def invalid_transition_message(origin: CurrentStatus, destination: CurrentStatus) -> str:
    """Human-readable reason why ``origin -> destination`` is refused."""
    origin_label = CURRENT_STATUS_LABELS.get(origin, str(origin))
    destination_label = CURRENT_STATUS_LABELS.get(destination, str(destination))
    if origin == CurrentStatus.RETIRED:
        return (
            f'No se pueden mover elementos desde estado "{origin_label}" a "{destination_label}". '
            "Los elementos retirados no pueden volver al inventario."
        )
    return (
        f'No se puede cambiar de "{origin_label}" a "{destination_label}". '
        "Esta transición no está permitida."
    )


def recommended_reason(origin: CurrentStatus, destination: CurrentStatus) -> MovementReason:
    """Suggested reason code for a transition; advisory only."""
    return _RECOMMENDED_REASONS.get((origin, destination), MovementReason.MANUAL_ADJUSTMENT)


def recommended_cleaning_status(destination: CurrentStatus) -> CleaningStatus:
    return _RECOMMENDED_CLEANING.get(destination, CleaningStatus.GOOD)


def return_route(returned_as: CleaningStatus) -> Tuple[CurrentStatus, MovementReason]:
    """Destination status and reason for rented units returned in ``returned_as`` condition.

    Anything not listed (units reported merely "good") goes through cleaning.
    """
    return _RETURN_ROUTES.get(
        returned_as, (CurrentStatus.CLEANING, MovementReason.RETURNED_DIRTY)
    )


def dominant_status(distribution: Mapping[CurrentStatus, int]) -> CurrentStatus:
    """The status holding the most units; ties go to the earliest in BUCKET_ORDER.

    An empty lot reports AVAILABLE.
    """
    dominant = BUCKET_ORDER[0]
    highest = 0
    for status in BUCKET_ORDER:
        count = distribution.get(status, 0)
        if count > highest:
            dominant, highest = status, count
    return dominant
