import logging
import re

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from devevent.core.errors import ReferentialIntegrityError, ValidationError
from devevent.database.db import storage_errors
from devevent.models.bookings import Booking
from devevent.services.events import event_exists

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Largest value a signed 64-bit integer column can hold
MAX_EVENT_ID = 2**63 - 1


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_event_id(event_id) -> bool:
    return (
        isinstance(event_id, int)
        and not isinstance(event_id, bool)
        and 0 < event_id <= MAX_EVENT_ID
    )


def validate_booking(*, event_id, email) -> tuple[int, str]:
    """Return the event id and normalized email, or raise ValidationError."""
    if not is_valid_event_id(event_id):
        raise ValidationError("event_id", "Invalid event id")

    if not isinstance(email, str):
        raise ValidationError("email", "Invalid email address")
    normalized = normalize_email(email)
    if not EMAIL_PATTERN.fullmatch(normalized):
        raise ValidationError("email", "Invalid email address")

    return event_id, normalized


def create_booking(db: Session, *, event_id: int, email: str) -> Booking:
    """
    Record a booking for an existing event.

    The existence check and the insert are not one transaction. An event
    removed in between is still caught by the foreign key on
    bookings.event_id, which surfaces as the same ReferentialIntegrityError.
    """
    event_id, email = validate_booking(event_id=event_id, email=email)

    if not event_exists(db, event_id):
        raise ReferentialIntegrityError(
            "Cannot create booking: referenced event does not exist"
        )

    booking = Booking(event_id=event_id, email=email)
    db.add(booking)
    with storage_errors(db, "saving booking"):
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise ReferentialIntegrityError(
                "Cannot create booking: referenced event does not exist"
            ) from e
        db.refresh(booking)

    logger.info(f"Created booking {booking.id} for event {event_id}")
    return booking
