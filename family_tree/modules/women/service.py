import logging
from datetime import date
from fastapi import HTTPException
from typing import Any, Dict, List, Optional

from family_tree.core.exceptions import BackendError
from family_tree.database.backend import Backend
from family_tree.modules.members.mapping import (
    Tables, PERSON_FIELDS, WOMAN_FIELDS, WOMAN_LINK_FIELDS, WIFE_LINK,
)
from family_tree.modules.members.schemas import MaritalStatus
from family_tree.modules.women.schemas import WomanCreate, WomanUpdate, WomanResponse

logger = logging.getLogger(__name__)


def to_woman(row: Dict[str, Any]) -> WomanResponse:
    return WomanResponse(**WOMAN_FIELDS.to_record(row))


class WomanService:
    def __init__(self, backend: Backend):
        self.backend = backend

    def list_women(self) -> List[WomanResponse]:
        rows = self.backend.fetch_table(Tables.WOMEN, order=WOMAN_FIELDS.column("first_name"))
        return [to_woman(row) for row in rows]

    def get_woman(self, woman_id: int) -> WomanResponse:
        row = self.backend.fetch_one(Tables.WOMEN, {"id": woman_id})
        if not row:
            raise HTTPException(status_code=404, detail="Woman not found")
        return to_woman(row)

    def is_national_id_unique(self, national_id: Optional[str], exclude_woman_id: Optional[int] = None) -> bool:
        if not national_id or not national_id.strip():
            return True
        filters = {WOMAN_FIELDS.column("national_id"): national_id.strip()}
        if exclude_woman_id is not None:
            filters["id__neq"] = exclude_woman_id
        return not self.backend.fetch_table(Tables.WOMEN, filters, columns="id")

    def create_woman(self, woman_data: WomanCreate) -> WomanResponse:
        """Insert a woman; a married woman with a linked person also gets a wife link"""
        values = woman_data.model_dump(mode="json", exclude_none=True)
        linked_person_id = values.pop("linked_person_id", None)
        if not self.is_national_id_unique(values.get("national_id")):
            raise HTTPException(status_code=400, detail="National ID is already registered to another woman")

        linked_person = None
        if linked_person_id is not None:
            name_column = PERSON_FIELDS.column("first_name")
            linked_person = self.backend.fetch_one(
                Tables.PERSONS, {"id": linked_person_id}, columns=f"id, {name_column}"
            )
            if not linked_person:
                raise HTTPException(status_code=400, detail=f"Person {linked_person_id} not found")

        woman = to_woman(self.backend.insert(Tables.WOMEN, WOMAN_FIELDS.to_row(values)))
        logger.info(f"Woman {woman.id} created")

        if linked_person and woman_data.marital_status == MaritalStatus.married:
            husband = linked_person.get(PERSON_FIELDS.column("first_name"))
            try:
                self.backend.insert(Tables.WOMEN_LINKS, WOMAN_LINK_FIELDS.to_row({
                    "woman_id": woman.id,
                    "person_id": linked_person_id,
                    "link_type": WIFE_LINK,
                    "reason": f"زواج {woman.first_name} من {husband or 'شخص'}",
                    "event_date": date.today().isoformat(),
                    "importance": "متوسطة",
                }))
            except BackendError as e:
                logger.error(
                    f"Woman {woman.id} stored without wife link to person {linked_person_id}: {e}"
                )
                raise
            logger.info(f"Woman {woman.id} linked as wife of person {linked_person_id}")
        return woman

    def update_woman(self, woman_id: int, woman_data: WomanUpdate) -> WomanResponse:
        values = woman_data.model_dump(mode="json", exclude_unset=True)
        if not values:
            return self.get_woman(woman_id)
        if not self.is_national_id_unique(values.get("national_id"), exclude_woman_id=woman_id):
            raise HTTPException(status_code=400, detail="National ID is already registered to another woman")
        rows = self.backend.update(Tables.WOMEN, {"id": woman_id}, WOMAN_FIELDS.to_row(values))
        if not rows:
            raise HTTPException(status_code=404, detail="Woman not found")
        return to_woman(rows[0])
