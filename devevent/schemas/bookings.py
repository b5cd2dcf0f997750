from datetime import datetime

from pydantic import BaseModel


class BookRequest(BaseModel):
    event_id: int
    email: str


class BookingOut(BaseModel):
    id: int
    event_id: int
    email: str
    created_at: datetime

    class Config:
        from_attributes = True


class BookingCreatedOut(BaseModel):
    success: bool
    booking: BookingOut
