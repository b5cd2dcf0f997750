from datetime import datetime

from pydantic import BaseModel


# ---------- Event ----------
class EventCreate(BaseModel):
    """Raw event attributes as received; validated by the events service."""

    title: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: str
    audience: str
    agenda: list[str]
    organizer: str
    tags: list[str]


class NormalizedEvent(EventCreate):
    """Event attributes after validation, trimming and normalization."""

    slug: str


class EventOut(NormalizedEvent):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class EventCreatedOut(BaseModel):
    message: str
    event: EventOut


class EventListOut(BaseModel):
    message: str
    events: list[EventOut]
