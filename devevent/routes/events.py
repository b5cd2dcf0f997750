import json

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from devevent.core.errors import DevEventError, UniquenessViolation, ValidationError
from devevent.core.security import require_api_token
from devevent.database.db import get_db
from devevent.schemas.events import EventCreate, EventCreatedOut, EventListOut, EventOut
from devevent.services.cache import cache_events, get_cached_events, invalidate_events
from devevent.services.events import create_event, list_events
from devevent.services.images import ImageHost, get_image_host

router = APIRouter(
    prefix="/api/events",
    tags=["events"],
    dependencies=[Depends(require_api_token)],
)


def _parse_string_list(raw: str) -> list[str]:
    value = json.loads(raw)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError("expected a JSON array of strings")
    return value


@router.post("", response_model=EventCreatedOut, status_code=status.HTTP_201_CREATED)
def create_event_route(
    image: UploadFile = File(...),
    title: str = Form(...),
    description: str = Form(...),
    overview: str = Form(...),
    venue: str = Form(...),
    location: str = Form(...),
    date: str = Form(...),
    time: str = Form(...),
    mode: str = Form(...),
    audience: str = Form(...),
    organizer: str = Form(...),
    agenda: str = Form(...),
    tags: str = Form(...),
    db: Session = Depends(get_db),
    image_host: ImageHost = Depends(get_image_host),
):
    try:
        agenda_items = _parse_string_list(agenda)
        tag_items = _parse_string_list(tags)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON format for tags or agenda")

    try:
        image_url = image_host.upload(image.file.read(), image.filename or "")
        record = EventCreate(
            title=title,
            description=description,
            overview=overview,
            image=image_url,
            venue=venue,
            location=location,
            date=date,
            time=time,
            mode=mode,
            audience=audience,
            agenda=agenda_items,
            organizer=organizer,
            tags=tag_items,
        )
        try:
            event = create_event(db, record)
        except DevEventError:
            # No event points at the stored image
            image_host.remove(image_url)
            raise
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except UniquenessViolation as e:
        raise HTTPException(status_code=409, detail=str(e))

    invalidate_events()
    return {"message": "Event Created Successfully.", "event": event}


@router.get("", response_model=EventListOut)
def list_events_route(db: Session = Depends(get_db)):
    """All events, newest first. Served from the cache when warm."""
    events = get_cached_events()
    if events is None:
        events = [
            EventOut.model_validate(event).model_dump(mode="json")
            for event in list_events(db)
        ]
        cache_events(events)
    return {"message": "Event Fetched Successfully.", "events": events}
