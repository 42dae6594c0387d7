from pydantic import BaseModel
from typing import Dict


class FamilyStatistics(BaseModel):
    total_men: int
    total_women: int
    total_branches: int
    total_locations: int
    generation_counts: Dict[int, int]
    max_generation: int
