import logging
from collections import Counter
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import HTTPException

from family_tree.config.permissions_config import has_unrestricted_access
from family_tree.core.exceptions import DeletionConstraintError
from family_tree.database.backend import Backend
from family_tree.modules.auth.schemas import UserProfile
from family_tree.modules.members.mapping import (
    Tables, PERSON_FIELDS, PERSON_DETAILS_FIELDS, EVENT_FIELDS, WOMAN_LINK_FIELDS,
    WOMAN_FIELDS, WIFE_LINK, NOTABLE_COLUMNS,
)
from family_tree.modules.members.schemas import (
    Member, MemberCreate, MemberUpdate, MemberDetails, MemberWriteResult,
    ChildCard, ChildDisplayData, ChildQuickStats, ChildVisualTheme, ChildFullData,
)
from family_tree.modules.tree.builder import TreeNode, build_forest, generation_color

logger = logging.getLogger(__name__)

DETAILS_COLUMNS = f"*, notables({', '.join(NOTABLE_COLUMNS)})"

# submit_person_change returns this instead of a change id when the change was applied directly
APPLIED_IMMEDIATELY = -1


def to_member(row: Dict[str, Any]) -> Member:
    return Member(**PERSON_FIELDS.to_record(row))


def to_member_details(row: Dict[str, Any]) -> MemberDetails:
    record = PERSON_DETAILS_FIELDS.to_record(row)
    notable = row.get("notables")
    if isinstance(notable, list):
        notable = notable[0] if notable else None
    if notable:
        record["notable"] = notable
    return MemberDetails(**record)


def _scalar(result: Any) -> Any:
    if isinstance(result, list):
        return result[0] if result else None
    return result


def _age_in_years(birth: date, until: date) -> int:
    return int((until - birth).days / 365.25)


class MemberService:
    def __init__(self, backend: Backend):
        self.backend = backend

    def list_members(self) -> List[Member]:
        """All persons as stored, ordered by their tree path"""
        rows = self.backend.fetch_table(Tables.PERSONS, order="path")
        return [to_member(row) for row in rows]

    def list_member_details(self) -> List[MemberDetails]:
        """All persons with resolved names, generation and notable info"""
        rows = self.backend.fetch_table(Tables.PERSONS_DETAILS, columns=DETAILS_COLUMNS, order="path")
        return [to_member_details(row) for row in rows]

    def get_member(self, member_id: int) -> MemberDetails:
        row = self.backend.fetch_one(Tables.PERSONS_DETAILS, {"id": member_id}, columns=DETAILS_COLUMNS)
        if not row:
            raise HTTPException(status_code=404, detail="Member not found")
        return to_member_details(row)

    def is_national_id_unique(self, national_id: Optional[str], exclude_member_id: Optional[int] = None) -> bool:
        """Empty national id is always allowed"""
        if not national_id or not national_id.strip():
            return True
        filters = {PERSON_FIELDS.column("national_id"): national_id.strip()}
        if exclude_member_id is not None:
            filters["id__neq"] = exclude_member_id
        return not self.backend.fetch_table(Tables.PERSONS, filters, columns="id")

    def create_member(self, data: MemberCreate, profile: UserProfile) -> MemberWriteResult:
        """Insert directly for unrestricted roles; otherwise submit the insert for approval"""
        values = data.model_dump(mode="json", exclude_none=True)
        self._validate(values)

        if not has_unrestricted_access(profile.role_name):
            return self._submit_change("insert", None, values)

        row = PERSON_FIELDS.to_row(values)
        row["path"] = "0"  # replaced by the backend path trigger
        member = to_member(self.backend.insert(Tables.PERSONS, row))
        logger.info(f"Member {member.id} created by {profile.id}")
        return MemberWriteResult(status="applied", member=member, message="Member added")

    def update_member(self, member_id: int, data: MemberUpdate, profile: UserProfile) -> MemberWriteResult:
        values = data.model_dump(mode="json", exclude_unset=True)
        existing = self._get_stored_member(member_id)
        if not values:
            return MemberWriteResult(status="applied", member=existing, message="No changes")
        self._validate(values, member_id=member_id)

        if not has_unrestricted_access(profile.role_name):
            return self._submit_change("update", member_id, values)

        rows = self.backend.update(Tables.PERSONS, {"id": member_id}, PERSON_FIELDS.to_row(values))
        if not rows:
            raise HTTPException(status_code=404, detail="Member not found")
        logger.info(f"Member {member_id} updated by {profile.id}")
        return MemberWriteResult(status="applied", member=to_member(rows[0]), message="Member updated")

    def delete_member(self, member_id: int) -> bool:
        """Delete a person unless other persons reference them as father or mother"""
        self._get_stored_member(member_id)
        name_column = PERSON_FIELDS.column("first_name")
        for parent_column, role in (("father_id", "father"), ("mother_id", "mother")):
            children = self.backend.fetch_table(
                Tables.PERSONS, {parent_column: member_id}, columns=f"id, {name_column}"
            )
            if children:
                names = [child.get(name_column) or str(child["id"]) for child in children]
                raise DeletionConstraintError(
                    f"Cannot delete this member because they are the {role} of other family members: "
                    f"{', '.join(names)}. Delete the children or change their {role} first.",
                    children=names,
                )
        deleted = self.backend.delete(Tables.PERSONS, {"id": member_id})
        logger.info(f"Member {member_id} deleted")
        return len(deleted) > 0

    def get_children_cards(self, member_id: int, palette: List[str]) -> List[ChildCard]:
        """Immediate children ordered by birth date, with quick stats for each"""
        children = [
            to_member_details(row) for row in self.backend.fetch_table(
                Tables.PERSONS_DETAILS,
                {"father_id": member_id},
                order=PERSON_FIELDS.column("birth_date"),
            )
        ]
        if not children:
            return []
        child_ids = [child.id for child in children]

        grandchildren = Counter(
            row["father_id"] for row in self.backend.fetch_table(
                Tables.PERSONS, {"father_id__in": child_ids}, columns="id, father_id"
            )
        )
        person_column = EVENT_FIELDS.column("person_id")
        achievements = Counter(
            row[person_column] for row in self.backend.fetch_table(
                Tables.EVENTS,
                {f"{person_column}__in": child_ids},
                columns=f"{EVENT_FIELDS.column('id')}, {person_column}",
            )
        )
        spouses = self._spouse_names(child_ids)

        today = date.today()
        cards = []
        for child in children:
            age = None
            if child.birth_date:
                age = _age_in_years(child.birth_date, child.death_date or today)
            children_count = grandchildren.get(child.id, 0)
            spouse = spouses.get(child.id)
            cards.append(ChildCard(
                id=child.id,
                parent_id=member_id,
                display_data=ChildDisplayData(
                    name=child.name,
                    birth_year=child.birth_date.year if child.birth_date else None,
                    current_age=age,
                    status="alive" if child.is_alive else "deceased",
                    primary_title=child.position,
                ),
                quick_stats=ChildQuickStats(
                    has_children=children_count > 0,
                    children_count=children_count,
                    achievements_count=achievements.get(child.id, 0),
                    is_married=spouse is not None,
                    spouse=spouse,
                ),
                visual_theme=ChildVisualTheme(
                    inherited_color=generation_color(child.generation or 1, palette),
                    generation_level=child.generation,
                    branch_indicator=child.branch_name,
                ),
                full_data=ChildFullData(
                    birth_date=child.birth_date,
                    death_date=child.death_date,
                    location=child.birth_place,
                    national_id=child.national_id,
                    position=child.position,
                    education=child.education_level,
                    notes=child.notes,
                ),
            ))
        return cards

    def get_children_count(self, member_id: int) -> int:
        return self.backend.count(Tables.PERSONS, {"father_id": member_id}, column="id")

    def get_relatives(self, member_id: int, relation: str) -> List[MemberDetails]:
        """descendants / ancestors / siblings through the matching RPC"""
        procedure = {
            "descendants": "get_descendants",
            "ancestors": "get_ancestors",
            "siblings": "get_siblings",
        }[relation]
        rows = self.backend.call_procedure(procedure, {"person_id": member_id}) or []
        return [to_member_details(row) for row in rows]

    def get_descendants_tree(self, member_id: int, max_depth: int = 3) -> List[TreeNode]:
        """Multi-generation descendants folded into a forest rooted at the person"""
        rows = self.backend.call_procedure(
            "get_descendants_tree", {"root_person_id": member_id, "max_depth": max_depth}
        ) or []
        return build_forest([to_member_details(row) for row in rows])

    def _spouse_names(self, person_ids: List[int]) -> Dict[int, str]:
        first, father, family = (WOMAN_FIELDS.column(f) for f in ("first_name", "father_name", "family_name"))
        rows = self.backend.fetch_table(
            Tables.WOMEN_LINKS,
            {
                f"{WOMAN_LINK_FIELDS.column('person_id')}__in": person_ids,
                WOMAN_LINK_FIELDS.column("link_type"): WIFE_LINK,
            },
            columns=f"person_id, {Tables.WOMEN}!inner({first}, {father}, {family})",
        )
        spouses = {}
        for row in rows:
            woman = row.get(Tables.WOMEN)
            if isinstance(woman, list):
                woman = woman[0] if woman else None
            if not woman or row["person_id"] in spouses:
                continue
            parts = [woman.get(first), woman.get(father), woman.get(family)]
            spouses[row["person_id"]] = " ".join(part for part in parts if part)
        return spouses

    def _get_stored_member(self, member_id: int) -> Member:
        row = self.backend.fetch_one(Tables.PERSONS, {"id": member_id})
        if not row:
            raise HTTPException(status_code=404, detail="Member not found")
        return to_member(row)

    def _validate(self, values: Dict[str, Any], member_id: Optional[int] = None):
        if not self.is_national_id_unique(values.get("national_id"), exclude_member_id=member_id):
            raise HTTPException(status_code=400, detail="National ID is already registered to another member")
        father_id = values.get("father_id")
        if father_id is None:
            return
        if member_id is not None and father_id == member_id:
            raise HTTPException(status_code=400, detail="A member cannot be their own father")
        if not self.backend.fetch_one(Tables.PERSONS, {"id": father_id}, columns="id"):
            raise HTTPException(status_code=400, detail=f"Father {father_id} not found")
        if member_id is not None and self._is_descendant(father_id, member_id):
            raise HTTPException(status_code=400, detail="A descendant cannot become the member's father")

    def _is_descendant(self, candidate_id: int, ancestor_id: int) -> bool:
        """Walk father links up from candidate; True when ancestor_id is reached"""
        fathers = {
            row["id"]: row.get("father_id")
            for row in self.backend.fetch_table(Tables.PERSONS, columns="id, father_id")
        }
        seen = set()
        current = fathers.get(candidate_id)
        while current is not None and current not in seen:
            if current == ancestor_id:
                return True
            seen.add(current)
            current = fathers.get(current)
        return False

    def _submit_change(self, change_type: str, original_id: Optional[int], values: Dict[str, Any]) -> MemberWriteResult:
        result = _scalar(self.backend.call_procedure("submit_person_change", {
            "p_change_type": change_type,
            "p_original_person_id": original_id,
            "p_person_data": PERSON_FIELDS.to_row(values),
        }))
        if result == APPLIED_IMMEDIATELY:
            member = self._get_stored_member(original_id) if original_id is not None else None
            return MemberWriteResult(status="applied", member=member, message="Change applied")
        logger.info(f"Person {change_type} submitted for approval as change {result}")
        return MemberWriteResult(
            status="pending",
            change_id=result,
            message="Change submitted for administrator approval"
        )
