import logging
from fastapi import HTTPException
from typing import List

from family_tree.database.backend import Backend, sanitize_or_term
from family_tree.modules.members.mapping import (
    Tables, PERSON_DETAILS_FIELDS, WOMAN_FIELDS, BRANCH_FIELDS, LOCATION_FIELDS,
)
from family_tree.modules.members.schemas import MemberDetails
from family_tree.modules.members.service import to_member_details
from family_tree.modules.search.schemas import SearchImportance, SearchResponse, SearchResult
from family_tree.modules.women.schemas import WomanResponse
from family_tree.modules.women.service import to_woman

logger = logging.getLogger(__name__)

GENERATION_ORDER = [PERSON_DETAILS_FIELDS.column("generation"), PERSON_DETAILS_FIELDS.column("first_name")]


def person_result(member: MemberDetails, importance: SearchImportance) -> SearchResult:
    description = f"Generation {member.generation}" if member.generation is not None else "Generation unknown"
    if member.branch_name:
        description = f"{description} - {member.branch_name}"
    return SearchResult(
        id=member.id,
        title=member.name,
        kind="person",
        description=description,
        date=member.birth_date,
        location=member.birth_place,
        additional_info=member.national_id,
        importance=importance,
    )


def woman_result(woman: WomanResponse, importance: SearchImportance) -> SearchResult:
    return SearchResult(
        id=woman.id,
        title=woman.full_name,
        kind="woman",
        description=f"Family {woman.family_name}" if woman.family_name else "Family unknown",
        date=woman.birth_date,
        additional_info=woman.national_id,
        importance=importance,
    )


class SearchService:
    def __init__(self, backend: Backend):
        self.backend = backend

    def search_general(self, query: str) -> SearchResponse:
        """Name or national id substring match over the persons details view"""
        term = sanitize_or_term(query)
        results = []
        if term:
            pattern = f"%{term}%"
            rows = self.backend.fetch_table(
                Tables.PERSONS_DETAILS,
                order=GENERATION_ORDER,
                any_of=[
                    (PERSON_DETAILS_FIELDS.column(field), pattern)
                    for field in ("first_name", "full_name", "national_id")
                ],
            )
            results = [person_result(to_member_details(row), SearchImportance.normal) for row in rows]
        return self._response("general", query, results)

    def search_national_id(self, national_id: str) -> SearchResponse:
        """Exact national id match across men and women"""
        national_id = national_id.strip()
        men = self.backend.fetch_table(
            Tables.PERSONS_DETAILS, {PERSON_DETAILS_FIELDS.column("national_id"): national_id}
        )
        women = self.backend.fetch_table(Tables.WOMEN, {WOMAN_FIELDS.column("national_id"): national_id})
        results = [person_result(to_member_details(row), SearchImportance.high) for row in men]
        results.extend(woman_result(to_woman(row), SearchImportance.high) for row in women)
        return self._response("national_id", national_id, results)

    def search_branch(self, branch_id: int) -> SearchResponse:
        branch = self.backend.fetch_one(Tables.BRANCHES, {BRANCH_FIELDS.column("id"): branch_id})
        if not branch:
            raise HTTPException(status_code=404, detail="Branch not found")
        branch_name = branch[BRANCH_FIELDS.column("name")]
        rows = self.backend.fetch_table(
            Tables.PERSONS_DETAILS,
            {PERSON_DETAILS_FIELDS.column("branch_name"): branch_name},
            order=GENERATION_ORDER,
        )
        results = [person_result(to_member_details(row), SearchImportance.medium) for row in rows]
        return self._response("branch", branch_name, results)

    def search_generation(self, generation: int) -> SearchResponse:
        rows = self.backend.fetch_table(
            Tables.PERSONS_DETAILS,
            {PERSON_DETAILS_FIELDS.column("generation"): generation},
            order=PERSON_DETAILS_FIELDS.column("first_name"),
        )
        results = [person_result(to_member_details(row), SearchImportance.normal) for row in rows]
        return self._response("generation", str(generation), results)

    def search_location(self, location_id: int) -> SearchResponse:
        """Persons whose birth or death place mentions the location's country"""
        location = self.backend.fetch_one(Tables.LOCATIONS, {LOCATION_FIELDS.column("id"): location_id})
        if not location:
            raise HTTPException(status_code=404, detail="Location not found")
        country = location[LOCATION_FIELDS.column("country")]

        members = [to_member_details(row) for row in self.backend.fetch_table(Tables.PERSONS_DETAILS, order="path")]
        results = [
            person_result(member, SearchImportance.medium)
            for member in members
            if country in (member.birth_place or "") or country in (member.death_place or "")
        ]
        return self._response("location", country, results)

    @staticmethod
    def _response(search_type: str, query: str, results: List[SearchResult]) -> SearchResponse:
        logger.debug(f"{search_type} search for '{query}' returned {len(results)} results")
        return SearchResponse(search_type=search_type, query=query, total=len(results), results=results)
