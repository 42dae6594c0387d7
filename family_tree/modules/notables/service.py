import logging
from collections import Counter
from fastapi import HTTPException
from typing import Optional

from family_tree.database.backend import Backend
from family_tree.modules.members.mapping import Tables
from family_tree.modules.notables.schemas import (
    CATEGORY_TITLES, NotableCreate, NotableUpdate, NotableResponse, NotableCategory, NotablesListResponse
)

logger = logging.getLogger(__name__)


class NotableService:
    def __init__(self, backend: Backend):
        self.backend = backend

    def list_notables(self, category: Optional[str] = None, search: Optional[str] = None) -> NotablesListResponse:
        """Notables ordered by category then name; categories are counted before filtering"""
        rows = self.backend.fetch_table(Tables.NOTABLES, order=["category", "full_name"])
        notables = [NotableResponse(**row) for row in rows]

        counts = Counter(notable.category for notable in notables)
        categories = [
            NotableCategory(category=name, title=CATEGORY_TITLES.get(name, name), count=count)
            for name, count in counts.items()
        ]

        if category:
            notables = [n for n in notables if n.category == category]
        if search:
            term = search.lower()
            notables = [
                n for n in notables
                if term in (n.full_name or "").lower() or term in (n.biography or "").lower()
            ]
        return NotablesListResponse(total=len(notables), categories=categories, notables=notables)

    def get_notable(self, notable_id: int) -> NotableResponse:
        row = self.backend.fetch_one(Tables.NOTABLES, {"id": notable_id})
        if not row:
            raise HTTPException(status_code=404, detail="Notable not found")
        return NotableResponse(**row)

    def create_notable(self, notable_data: NotableCreate) -> NotableResponse:
        if not self.backend.fetch_one(Tables.PERSONS, {"id": notable_data.person_id}, columns="id"):
            raise HTTPException(status_code=400, detail=f"Person {notable_data.person_id} not found")
        if self.backend.fetch_one(Tables.NOTABLES, {"person_id": notable_data.person_id}, columns="id"):
            raise HTTPException(status_code=400, detail="Person is already listed as notable")
        created = self.backend.insert(Tables.NOTABLES, notable_data.model_dump(exclude_none=True))
        logger.info(f"Notable {created.get('id')} created for person {notable_data.person_id}")
        return NotableResponse(**created)

    def update_notable(self, notable_id: int, notable_data: NotableUpdate) -> NotableResponse:
        values = notable_data.model_dump(exclude_unset=True)
        if not values:
            return self.get_notable(notable_id)
        rows = self.backend.update(Tables.NOTABLES, {"id": notable_id}, values)
        if not rows:
            raise HTTPException(status_code=404, detail="Notable not found")
        return NotableResponse(**rows[0])

    def delete_notable(self, notable_id: int) -> bool:
        deleted = self.backend.delete(Tables.NOTABLES, {"id": notable_id})
        if not deleted:
            raise HTTPException(status_code=404, detail="Notable not found")
        logger.info(f"Notable {notable_id} deleted")
        return True
