"""
Test database models (Event and Booking).
"""
import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from devevent.models.bookings import Booking
from devevent.models.events import Event


def build_event(event_data: dict, **overrides) -> Event:
    fields = {**event_data, "slug": "pycon-meetup-2025", **overrides}
    return Event(**fields)


class TestEventModel:
    """Test the Event model."""

    def test_create_event(self, db_session: Session, event_data: dict):
        """Test creating an event sets id and timestamps."""
        event = build_event(event_data)
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)

        assert event.id is not None
        assert event.slug == "pycon-meetup-2025"
        assert event.agenda == ["Doors open", "Talks", "Networking"]
        assert event.tags == ["python", "meetup"]
        assert event.created_at is not None
        assert event.updated_at is not None

    def test_slug_is_unique(self, db_session: Session, event_data: dict):
        """Test the storage layer rejects a second event with the same slug."""
        db_session.add(build_event(event_data))
        db_session.commit()

        db_session.add(build_event(event_data, title="Another title"))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_update_refreshes_updated_at(self, db_session: Session, event_data: dict):
        """Test that updated_at moves forward on update."""
        event = build_event(event_data)
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)
        created = event.updated_at

        event.venue = "New Venue"
        db_session.commit()
        db_session.refresh(event)

        assert event.updated_at >= created
        assert event.venue == "New Venue"


class TestBookingModel:
    """Test the Booking model."""

    def test_create_booking(self, db_session: Session, event_data: dict):
        """Test creating a booking."""
        event = build_event(event_data)
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)

        booking = Booking(event_id=event.id, email="user@example.com")
        db_session.add(booking)
        db_session.commit()
        db_session.refresh(booking)

        assert booking.id is not None
        assert booking.event_id == event.id
        assert booking.email == "user@example.com"
        assert booking.created_at is not None

    def test_booking_requires_existing_event(self, db_session: Session):
        """Test the foreign key rejects a booking for a missing event."""
        db_session.add(Booking(event_id=99999, email="user@example.com"))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()
