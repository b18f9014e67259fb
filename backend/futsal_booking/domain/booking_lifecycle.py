# backend/futsal_booking/domain/booking_lifecycle.py
"""
Booking lifecycle state machine.

    PENDING ──cancel──▶ CANCELLED (terminal)
       │
       └──(out of band)──▶ CONFIRMED / COMPLETED (terminal)

Only creation (PENDING) and owner cancellation are driven by the booking
service. CONFIRMED and COMPLETED appear in the transition table so that a
future confirmation or completion process can reuse ``ensure_transition``,
but nothing in this package triggers them.
"""

from datetime import date
from decimal import Decimal
from typing import FrozenSet, Mapping, Protocol, Union

from ..core.exceptions import ForbiddenException, InvalidStateTransitionException
from ..models.booking import Booking, BookingStatus

TRANSITIONS: Mapping[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset(
        {BookingStatus.CONFIRMED, BookingStatus.CANCELLED, BookingStatus.COMPLETED}
    ),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CANCELLED, BookingStatus.COMPLETED}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}

TERMINAL_STATUSES: FrozenSet[BookingStatus] = frozenset(
    status for status, targets in TRANSITIONS.items() if not targets
)


class OwnedBooking(Protocol):
    """Anything with an owner and a status can go through the lifecycle."""

    user_id: int
    status: str


def initial_status() -> BookingStatus:
    return BookingStatus.PENDING


def is_terminal(status: Union[BookingStatus, str]) -> bool:
    return BookingStatus(status) in TERMINAL_STATUSES


def can_transition(current: Union[BookingStatus, str], target: Union[BookingStatus, str]) -> bool:
    return BookingStatus(target) in TRANSITIONS[BookingStatus(current)]


def ensure_transition(
    current: Union[BookingStatus, str], target: Union[BookingStatus, str]
) -> BookingStatus:
    """
    Validate a status change and return the target status.

    Raises:
        InvalidStateTransitionException: If the table does not allow it
    """
    if not can_transition(current, target):
        raise InvalidStateTransitionException(
            current_status=BookingStatus(current).value,
            target_status=BookingStatus(target).value,
        )
    return BookingStatus(target)


def ensure_owner(booking: OwnedBooking, actor_user_id: int) -> None:
    """
    Raises:
        ForbiddenException: If the actor does not own the booking
    """
    if booking.user_id != actor_user_id:
        raise ForbiddenException(
            "You don't have permission to cancel this booking",
            details={"actor_user_id": actor_user_id},
        )


def check_cancellation(booking: OwnedBooking, actor_user_id: int) -> BookingStatus:
    """
    Decide whether ``actor_user_id`` may cancel ``booking``.

    Ownership is checked before status, so a non-owner is refused even when
    the booking is already terminal.

    Returns:
        BookingStatus.CANCELLED

    Raises:
        ForbiddenException: Actor is not the owner
        InvalidStateTransitionException: Booking already CANCELLED or COMPLETED
    """
    ensure_owner(booking, actor_user_id)
    return ensure_transition(booking.status, BookingStatus.CANCELLED)


def new_booking(
    *, user_id: int, schedule_id: int, booking_date: date, total_price: Decimal
) -> Booking:
    """Build an unsaved booking in the initial status."""
    return Booking(
        user_id=user_id,
        schedule_id=schedule_id,
        booking_date=booking_date,
        total_price=total_price,
        status=initial_status().value,
    )


def cancel(booking: Booking, actor_user_id: int) -> Booking:
    """Apply an owner cancellation in memory; persisting it is the caller's job."""
    check_cancellation(booking, actor_user_id)
    booking.cancel(actor_user_id)
    return booking
