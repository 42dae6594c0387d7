import logging
from fastapi import HTTPException
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel

from family_tree.database.backend import Backend
from family_tree.modules.archive.schemas import (
    AudioFileCreate, AudioFileUpdate, AudioFileResponse,
    DocumentCreate, DocumentUpdate, DocumentResponse,
)
from family_tree.modules.events.service import check_references
from family_tree.modules.members.mapping import Tables, FieldMap, AUDIO_FIELDS, DOCUMENT_FIELDS, EVENT_FIELDS

logger = logging.getLogger(__name__)

# Characters kept as opening and closing words when none are given
EXCERPT_LENGTH = 100


def format_duration(total_seconds: int) -> str:
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}:{seconds:02d}"


def parse_duration(value: Optional[str]) -> Optional[int]:
    """Seconds in an 'M:SS' or 'HH:MM:SS' duration; None when unreadable"""
    if not value:
        return None
    total = 0
    try:
        for part in str(value).split(":"):
            total = total * 60 + int(float(part))
    except ValueError:
        logger.warning(f"Unreadable recording duration: {value}")
        return None
    return total


def count_words(text: Optional[str]) -> int:
    return len(text.split()) if text else 0


class ArchiveService:
    """CRUD over one archive table; subclasses shape values on the way in and out."""

    table: str
    fields: FieldMap
    response_model: Type[BaseModel]
    label: str

    def __init__(self, backend: Backend):
        self.backend = backend
        self.id_column = self.fields.column("id")

    def to_response(self, row: Dict[str, Any]):
        return self.response_model(**self.fields.to_record(row))

    def prepare(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return values

    def list_items(self, person_id: Optional[int] = None, woman_id: Optional[int] = None,
                   event_id: Optional[int] = None) -> List[BaseModel]:
        record_filters = {"person_id": person_id, "woman_id": woman_id, "event_id": event_id}
        filters = {self.fields.column(name): value for name, value in record_filters.items() if value is not None}
        rows = self.backend.fetch_table(self.table, filters, order=self.fields.column("title"))
        return [self.to_response(row) for row in rows]

    def get_item(self, item_id: int):
        row = self.backend.fetch_one(self.table, {self.id_column: item_id})
        if not row:
            raise HTTPException(status_code=404, detail=f"{self.label} not found")
        return self.to_response(row)

    def create_item(self, item_data: BaseModel):
        values = self.prepare(item_data.model_dump(mode="json", exclude_none=True))
        self._check_links(values)
        item = self.to_response(self.backend.insert(self.table, self.fields.to_row(values)))
        logger.info(f"{self.label} {item.id} created")
        return item

    def update_item(self, item_id: int, item_data: BaseModel):
        values = self.prepare(item_data.model_dump(mode="json", exclude_unset=True))
        if not values:
            return self.get_item(item_id)
        self._check_links(values)
        rows = self.backend.update(self.table, {self.id_column: item_id}, self.fields.to_row(values))
        if not rows:
            raise HTTPException(status_code=404, detail=f"{self.label} not found")
        return self.to_response(rows[0])

    def delete_item(self, item_id: int) -> bool:
        deleted = self.backend.delete(self.table, {self.id_column: item_id})
        if not deleted:
            raise HTTPException(status_code=404, detail=f"{self.label} not found")
        logger.info(f"{self.label} {item_id} deleted")
        return True

    def _check_links(self, values: Dict[str, Any]):
        check_references(self.backend, values.get("person_id"), values.get("woman_id"), values.get("location_id"))
        event_id = values.get("event_id")
        if event_id is not None:
            event_column = EVENT_FIELDS.column("id")
            if not self.backend.fetch_one(Tables.EVENTS, {event_column: event_id}, columns=event_column):
                raise HTTPException(status_code=400, detail=f"Event {event_id} not found")


class AudioFileService(ArchiveService):
    table = Tables.AUDIO_FILES
    fields = AUDIO_FIELDS
    response_model = AudioFileResponse
    label = "Audio file"

    def to_response(self, row: Dict[str, Any]) -> AudioFileResponse:
        record = self.fields.to_record(row)
        record["duration_seconds"] = parse_duration(record.get("duration"))
        return AudioFileResponse(**record)

    def prepare(self, values: Dict[str, Any]) -> Dict[str, Any]:
        if "duration_seconds" in values:
            seconds = values.pop("duration_seconds")
            values["duration"] = format_duration(seconds) if seconds is not None else None
        return values


class DocumentService(ArchiveService):
    table = Tables.TEXT_DOCUMENTS
    fields = DOCUMENT_FIELDS
    response_model = DocumentResponse
    label = "Document"

    def prepare(self, values: Dict[str, Any]) -> Dict[str, Any]:
        full_text = values.get("full_text")
        if full_text:
            values["word_count"] = count_words(full_text)
            values.setdefault("opening_words", full_text[:EXCERPT_LENGTH])
            values.setdefault("closing_words", full_text[-EXCERPT_LENGTH:])
        return values
