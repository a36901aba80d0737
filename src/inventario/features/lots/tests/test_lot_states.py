import pytest

from inventario.features.lots.states import (
    ALLOWED_TRANSITIONS,
    BUCKET_ORDER,
    CleaningStatus,
    CurrentStatus,
    MovementReason,
    dominant_status,
    invalid_transition_message,
    is_valid_transition,
    recommended_cleaning_status,
    recommended_reason,
    return_route,
)

EXPECTED_TRANSITIONS = {
    CurrentStatus.AVAILABLE: {
        CurrentStatus.RENTED, CurrentStatus.CLEANING, CurrentStatus.MAINTENANCE, CurrentStatus.RETIRED,
    },
    CurrentStatus.RENTED: {
        CurrentStatus.AVAILABLE, CurrentStatus.CLEANING, CurrentStatus.MAINTENANCE, CurrentStatus.RETIRED,
    },
    CurrentStatus.CLEANING: {CurrentStatus.AVAILABLE, CurrentStatus.MAINTENANCE},
    CurrentStatus.MAINTENANCE: {CurrentStatus.AVAILABLE, CurrentStatus.RETIRED},
    CurrentStatus.RETIRED: set(),
}


@pytest.mark.parametrize("origin", list(CurrentStatus))
@pytest.mark.parametrize("destination", list(CurrentStatus))
def test_transition_table(origin, destination):
    expected = destination in EXPECTED_TRANSITIONS[origin]
    assert is_valid_transition(origin, destination) is expected


def test_retired_has_no_outbound_transitions():
    assert ALLOWED_TRANSITIONS[CurrentStatus.RETIRED] == ()


def test_invalid_transition_message_names_both_labels():
    message = invalid_transition_message(CurrentStatus.CLEANING, CurrentStatus.RENTED)
    assert "En Limpieza" in message
    assert "Alquilado" in message


def test_invalid_transition_message_from_retired():
    message = invalid_transition_message(CurrentStatus.RETIRED, CurrentStatus.AVAILABLE)
    assert "Retirado" in message
    assert "Disponible" in message
    assert "no pueden volver" in message


def test_recommended_reason():
    assert recommended_reason(CurrentStatus.AVAILABLE, CurrentStatus.RENTED) == MovementReason.RENTED_OUT
    assert recommended_reason(CurrentStatus.CLEANING, CurrentStatus.AVAILABLE) == MovementReason.CLEANING_COMPLETED
    assert recommended_reason(CurrentStatus.AVAILABLE, CurrentStatus.CLEANING) == MovementReason.MANUAL_ADJUSTMENT


def test_recommended_cleaning_status():
    assert recommended_cleaning_status(CurrentStatus.AVAILABLE) == CleaningStatus.CLEAN
    assert recommended_cleaning_status(CurrentStatus.MAINTENANCE) == CleaningStatus.DAMAGED


@pytest.mark.parametrize(
    "returned_as, destination, reason",
    [
        (CleaningStatus.CLEAN, CurrentStatus.AVAILABLE, MovementReason.RETURNED_CLEAN),
        (CleaningStatus.GOOD, CurrentStatus.CLEANING, MovementReason.RETURNED_DIRTY),
        (CleaningStatus.DIRTY, CurrentStatus.CLEANING, MovementReason.RETURNED_DIRTY),
        (CleaningStatus.VERY_DIRTY, CurrentStatus.CLEANING, MovementReason.RETURNED_DIRTY),
        (CleaningStatus.DAMAGED, CurrentStatus.MAINTENANCE, MovementReason.RETURNED_DAMAGED),
    ],
)
def test_return_route(returned_as, destination, reason):
    assert return_route(returned_as) == (destination, reason)
    assert is_valid_transition(CurrentStatus.RENTED, destination)


def test_dominant_status_picks_largest_bucket():
    distribution = {status: 0 for status in BUCKET_ORDER}
    distribution[CurrentStatus.CLEANING] = 4
    distribution[CurrentStatus.RENTED] = 3
    assert dominant_status(distribution) == CurrentStatus.CLEANING


def test_dominant_status_tie_goes_to_first_in_order():
    distribution = {
        CurrentStatus.AVAILABLE: 0,
        CurrentStatus.RENTED: 5,
        CurrentStatus.CLEANING: 0,
        CurrentStatus.MAINTENANCE: 5,
        CurrentStatus.RETIRED: 5,
    }
    assert dominant_status(distribution) == CurrentStatus.RENTED


def test_dominant_status_of_empty_lot():
    assert dominant_status({}) == CurrentStatus.AVAILABLE
