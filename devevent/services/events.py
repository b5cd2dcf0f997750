"""Event validation, normalization and persistence.

Validation and normalization run explicitly through
``validate_and_normalize`` right before every insert or re-save, so a
failing record never reaches the session.
"""

import logging
import re
from datetime import timezone
from typing import Optional

from dateutil import parser as date_parser
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from devevent.core.errors import (
    EventNotFoundError,
    UniquenessViolation,
    ValidationError,
)
from devevent.database.db import storage_errors
from devevent.models.events import Event
from devevent.schemas.events import EventCreate, NormalizedEvent

logger = logging.getLogger(__name__)

REQUIRED_STRING_FIELDS = (
    "title",
    "description",
    "overview",
    "image",
    "venue",
    "location",
    "date",
    "time",
    "mode",
    "audience",
    "organizer",
)
STRING_LIST_FIELDS = ("agenda", "tags")

TIME_PATTERN = re.compile(r"^(?:[01]\d|2[0-3]):[0-5]\d$")


def slugify(title: str) -> str:
    """Generate a URL-safe slug from an event title."""
    slug = title.lower().strip()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    return re.sub(r"-+", "-", slug)


def normalize_date(value: str) -> str:
    """Parse any reasonable date string and render it as YYYY-MM-DD.

    Timezone-aware values are converted to UTC before the date is taken.
    """
    try:
        parsed = date_parser.parse(value.strip())
    except (ValueError, OverflowError) as e:
        raise ValidationError(
            "date", "Invalid date format. Use a parseable date (e.g., YYYY-MM-DD or ISO 8601)"
        ) from e

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def normalize_time(value: str) -> str:
    time = value.strip()
    if not TIME_PATTERN.match(time):
        raise ValidationError(
            "time", "Invalid time format. Use HH:mm in 24-hour format (e.g., 09:00, 18:30)"
        )
    return time


def normalize_date_and_time(record: NormalizedEvent) -> NormalizedEvent:
    return record.model_copy(
        update={
            "date": normalize_date(record.date),
            "time": normalize_time(record.time),
        }
    )


def validate_event_fields(record: EventCreate) -> None:
    """Reject blank required strings and empty or blank-containing lists."""
    for field in REQUIRED_STRING_FIELDS:
        if not getattr(record, field).strip():
            raise ValidationError(field, "Field is required and cannot be empty")

    for field in STRING_LIST_FIELDS:
        items = getattr(record, field)
        if not items or any(not item.strip() for item in items):
            raise ValidationError(
                field, f"{field.capitalize()} must be a non-empty array of non-empty strings"
            )


def validate_and_normalize(
    record: EventCreate,
    *,
    previous_title: Optional[str] = None,
    current_slug: Optional[str] = None,
) -> NormalizedEvent:
    """Validate ``record`` and return its canonical form.

    The slug is regenerated when there is no current slug or the title
    differs from ``previous_title``; otherwise ``current_slug`` is kept.
    The input record is never modified.

    Raises:
        ValidationError: If a field is blank, a list is empty or has
            blank entries, the title yields an empty slug, or date/time
            cannot be normalized.
    """
    validate_event_fields(record)

    data = {field: getattr(record, field).strip() for field in REQUIRED_STRING_FIELDS}
    for field in STRING_LIST_FIELDS:
        data[field] = [item.strip() for item in getattr(record, field)]

    slug = current_slug
    if not slug or data["title"] != previous_title:
        slug = slugify(data["title"])
        if not slug:
            raise ValidationError("title", "Title must contain at least one letter or digit")

    return normalize_date_and_time(NormalizedEvent(slug=slug, **data))


def _commit(db: Session, slug: str) -> None:
    with storage_errors(db, "saving event"):
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise UniquenessViolation(f"An event with slug '{slug}' already exists") from e


def create_event(db: Session, record: EventCreate) -> Event:
    """Validate, normalize and insert a new event.

    Raises:
        ValidationError: If the record is invalid.
        UniquenessViolation: If another event already uses the slug.
        ConnectionError: If the database cannot be reached.
    """
    normalized = validate_and_normalize(record)

    event = Event(**normalized.model_dump())
    db.add(event)
    _commit(db, normalized.slug)
    with storage_errors(db, "loading event"):
        db.refresh(event)

    logger.info(f"Created event {event.id} ({event.slug})")
    return event


def replace_event(db: Session, event_id: int, record: EventCreate) -> Event:
    """Re-save every field of an existing event.

    The slug only changes when the title does.

    Raises:
        EventNotFoundError: If the event does not exist.
        ValidationError: If the record is invalid.
        UniquenessViolation: If the new slug collides with another event.
        ConnectionError: If the database cannot be reached.
    """
    event = get_event(db, event_id)
    if event is None:
        raise EventNotFoundError(event_id)

    normalized = validate_and_normalize(
        record, previous_title=event.title, current_slug=event.slug
    )
    for field, value in normalized.model_dump().items():
        setattr(event, field, value)
    _commit(db, normalized.slug)
    with storage_errors(db, "loading event"):
        db.refresh(event)

    logger.info(f"Replaced event {event.id} ({event.slug})")
    return event


def list_events(db: Session) -> list[Event]:
    """Return all events, most recently created first."""
    stmt = select(Event).order_by(Event.created_at.desc(), Event.id.desc())
    with storage_errors(db, "listing events"):
        return list(db.scalars(stmt))


def get_event(db: Session, event_id: int) -> Optional[Event]:
    with storage_errors(db, "loading event"):
        return db.get(Event, event_id)


def event_exists(db: Session, event_id: int) -> bool:
    """Check for an event by id, loading only the id column."""
    with storage_errors(db, "checking event"):
        return db.scalar(select(Event.id).where(Event.id == event_id)) is not None
