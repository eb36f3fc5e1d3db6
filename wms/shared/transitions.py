"""Status machine validation shared by the workflow features."""

from enum import Enum
from typing import TypeVar

from wms.core.exceptions import InvalidTransitionError

S = TypeVar("S", bound=Enum)


def is_valid_transition(
    transitions: dict[S, set[S]],
    current_status: S,
    new_status: S,
) -> bool:
    """Check if a state transition is allowed.

    Args:
        transitions: Allowed next states per state.
        current_status: Current status.
        new_status: Proposed new status.

    Returns:
        True if transition is valid, False otherwise.
    """
    return new_status in transitions.get(current_status, set())


def validate_transition(
    transitions: dict[S, set[S]],
    current_status: S,
    new_status: S,
    entity: str,
    entity_id: int | str,
) -> None:
    """Raise if a state transition is not allowed.

    Raises:
        InvalidTransitionError: With the current, requested and allowed states.
    """
    if is_valid_transition(transitions, current_status, new_status):
        return

    valid_next = sorted(s.value for s in transitions.get(current_status, set()))
    raise InvalidTransitionError(
        message=(
            f"Cannot move {entity} {entity_id} from '{current_status.value}' "
            f"to '{new_status.value}'"
        ),
        details={
            "entity": entity,
            "entity_id": entity_id,
            "current_status": current_status.value,
            "requested_status": new_status.value,
            "allowed": valid_next,
        },
    )
