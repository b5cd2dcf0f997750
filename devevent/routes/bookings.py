from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from devevent.core.errors import ReferentialIntegrityError, ValidationError
from devevent.database.db import get_db
from devevent.schemas.bookings import BookingCreatedOut, BookRequest
from devevent.services.bookings import create_booking

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


@router.post("", response_model=BookingCreatedOut, status_code=status.HTTP_201_CREATED)
def book_event(payload: BookRequest, db: Session = Depends(get_db)):
    try:
        booking = create_booking(db, event_id=payload.event_id, email=payload.email)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ReferentialIntegrityError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {"success": True, "booking": booking}
