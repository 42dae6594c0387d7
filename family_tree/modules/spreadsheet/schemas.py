from pydantic import BaseModel
from typing import List


class SpreadsheetTable(BaseModel):
    name: str
    description: str
    primary_key: str
    columns: List[str]
    count: int


class ImportResult(BaseModel):
    table: str
    imported: int
    skipped_rows: int
    ignored_columns: List[str]
