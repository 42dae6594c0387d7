from pydantic import BaseModel
from typing import Optional, List, Literal
import datetime
from enum import Enum


class SearchImportance(str, Enum):
    high = "high"
    medium = "medium"
    normal = "normal"


class SearchResult(BaseModel):
    id: int
    title: str
    # person: any male-line person, woman: a record from the women table
    kind: Literal["person", "woman"]
    description: str
    date: Optional[datetime.date] = None
    location: Optional[str] = None
    additional_info: Optional[str] = None
    importance: SearchImportance = SearchImportance.normal


class SearchResponse(BaseModel):
    search_type: Literal["general", "national_id", "branch", "generation", "location"]
    query: str
    total: int
    results: List[SearchResult]
