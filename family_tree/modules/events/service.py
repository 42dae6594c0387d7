import logging
from fastapi import HTTPException
from typing import Any, Dict, List, Optional

from family_tree.database.backend import Backend
from family_tree.modules.events.schemas import EventCreate, EventUpdate, EventResponse, EventType
from family_tree.modules.members.mapping import Tables, EVENT_FIELDS, LOCATION_FIELDS

logger = logging.getLogger(__name__)


def to_event(row: Dict[str, Any]) -> EventResponse:
    return EventResponse(**EVENT_FIELDS.to_record(row))


def check_references(backend: Backend, person_id: Optional[int] = None, woman_id: Optional[int] = None,
                     location_id: Optional[int] = None):
    """Raise 400 when a referenced person, woman or location does not exist"""
    if person_id is not None and not backend.fetch_one(Tables.PERSONS, {"id": person_id}, columns="id"):
        raise HTTPException(status_code=400, detail=f"Person {person_id} not found")
    if woman_id is not None and not backend.fetch_one(Tables.WOMEN, {"id": woman_id}, columns="id"):
        raise HTTPException(status_code=400, detail=f"Woman {woman_id} not found")
    if location_id is not None:
        id_column = LOCATION_FIELDS.column("id")
        if not backend.fetch_one(Tables.LOCATIONS, {id_column: location_id}, columns=id_column):
            raise HTTPException(status_code=400, detail=f"Location {location_id} not found")


class EventService:
    def __init__(self, backend: Backend):
        self.backend = backend
        self.id_column = EVENT_FIELDS.column("id")

    def list_events(self, person_id: Optional[int] = None, woman_id: Optional[int] = None,
                    event_type: Optional[EventType] = None) -> List[EventResponse]:
        """Events newest first, optionally for one person or woman or of one type"""
        filters = {}
        if person_id is not None:
            filters[EVENT_FIELDS.column("person_id")] = person_id
        if woman_id is not None:
            filters[EVENT_FIELDS.column("woman_id")] = woman_id
        if event_type is not None:
            filters.update(EVENT_FIELDS.to_row({"event_type": event_type}))
        rows = self.backend.fetch_table(
            Tables.EVENTS, filters, order=EVENT_FIELDS.column("event_date"), desc=True
        )
        return [to_event(row) for row in rows]

    def get_event(self, event_id: int) -> EventResponse:
        row = self.backend.fetch_one(Tables.EVENTS, {self.id_column: event_id})
        if not row:
            raise HTTPException(status_code=404, detail="Event not found")
        return to_event(row)

    def create_event(self, event_data: EventCreate) -> EventResponse:
        values = event_data.model_dump(mode="json", exclude_none=True)
        self._validate_subject(values.get("person_id"), values.get("woman_id"))
        check_references(self.backend, values.get("person_id"), values.get("woman_id"), values.get("location_id"))
        event = to_event(self.backend.insert(Tables.EVENTS, EVENT_FIELDS.to_row(values)))
        logger.info(f"Event {event.id} ({event.event_type}) created")
        return event

    def update_event(self, event_id: int, event_data: EventUpdate) -> EventResponse:
        values = event_data.model_dump(mode="json", exclude_unset=True)
        current = self.get_event(event_id)
        if not values:
            return current

        # Choosing one subject clears the other
        if values.get("person_id") is not None:
            values["woman_id"] = None
        elif values.get("woman_id") is not None:
            values["person_id"] = None
        person_id = values.get("person_id", current.person_id)
        woman_id = values.get("woman_id", current.woman_id)
        self._validate_subject(person_id, woman_id)
        check_references(
            self.backend, values.get("person_id"), values.get("woman_id"), values.get("location_id")
        )

        rows = self.backend.update(Tables.EVENTS, {self.id_column: event_id}, EVENT_FIELDS.to_row(values))
        if not rows:
            raise HTTPException(status_code=404, detail="Event not found")
        return to_event(rows[0])

    def delete_event(self, event_id: int) -> bool:
        deleted = self.backend.delete(Tables.EVENTS, {self.id_column: event_id})
        if not deleted:
            raise HTTPException(status_code=404, detail="Event not found")
        logger.info(f"Event {event_id} deleted")
        return True

    @staticmethod
    def _validate_subject(person_id: Optional[int], woman_id: Optional[int]):
        if (person_id is None) == (woman_id is None):
            raise HTTPException(status_code=400, detail="An event belongs to exactly one person or woman")
