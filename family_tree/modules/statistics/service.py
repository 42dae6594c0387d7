from collections import Counter

from family_tree.database.backend import Backend
from family_tree.modules.members.mapping import (
    Tables, PERSON_DETAILS_FIELDS, BRANCH_FIELDS, LOCATION_FIELDS,
)
from family_tree.modules.statistics.schemas import FamilyStatistics


class StatisticsService:
    def __init__(self, backend: Backend):
        self.backend = backend

    def get_family_statistics(self) -> FamilyStatistics:
        generation_column = PERSON_DETAILS_FIELDS.column("generation")
        rows = self.backend.fetch_table(
            Tables.PERSONS_DETAILS,
            {f"{generation_column}__not_null": True},
            columns=generation_column,
        )
        counts = Counter(row[generation_column] for row in rows)
        generation_counts = {generation: counts[generation] for generation in sorted(counts)}

        return FamilyStatistics(
            total_men=self.backend.count(Tables.PERSONS, column="id"),
            total_women=self.backend.count(Tables.WOMEN, column="id"),
            total_branches=self.backend.count(Tables.BRANCHES, column=BRANCH_FIELDS.column("id")),
            total_locations=self.backend.count(Tables.LOCATIONS, column=LOCATION_FIELDS.column("id")),
            generation_counts=generation_counts,
            max_generation=max(generation_counts, default=0),
        )
