"""
Spreadsheet export, templates and import for the family tables.

Workbooks are built and read with openpyxl. Import writes rows as they are
in the sheet (backend column names), so the service only checks column
names, drops timestamps and batches the upserts.
"""
import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from io import BytesIO
from typing import Any, Dict, Iterable, List, Optional, Tuple

from fastapi import HTTPException
from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font

from family_tree.database.backend import Backend
from family_tree.modules.members.mapping import (
    Tables, FieldMap, PERSON_FIELDS, WOMAN_FIELDS, LOCATION_FIELDS, BRANCH_FIELDS,
    EVENT_FIELDS, WOMAN_LINK_FIELDS, AUDIO_FIELDS, DOCUMENT_FIELDS,
)
from family_tree.modules.spreadsheet.schemas import SpreadsheetTable, ImportResult

logger = logging.getLogger(__name__)

SPREADSHEET_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
IMPORT_BATCH_SIZE = 100
TIMESTAMP_FIELDS = ("created_at", "updated_at")
TIMESTAMP_COLUMNS = {"تاريخ_الإنشاء", "تاريخ_التحديث", "created_at", "updated_at"}
DATA_SHEET = "البيانات"
INSTRUCTIONS_SHEET = "تعليمات"


@dataclass(frozen=True)
class TableSpec:
    name: str
    description: str
    fields: FieldMap
    # Fields maintained by the backend, never written from a sheet
    computed: Tuple[str, ...] = ()
    # Array columns, written and read as comma separated text
    list_fields: Tuple[str, ...] = ()
    primary_key: str = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "primary_key", self.fields.column("id"))

    @property
    def editable_columns(self) -> List[str]:
        skipped = {"id", *TIMESTAMP_FIELDS, *self.computed}
        return [column for name, column in self.fields.fields.items() if name not in skipped]

    @property
    def list_columns(self) -> List[str]:
        return [self.fields.column(name) for name in self.list_fields]


_ARCHIVE_LISTS = ("keywords", "people_mentioned", "places_mentioned")

TABLES: Dict[str, TableSpec] = {spec.name: spec for spec in (
    TableSpec(Tables.PERSONS, "بيانات الرجال في شجرة العائلة", PERSON_FIELDS, computed=("path",)),
    TableSpec(Tables.WOMEN, "بيانات النساء المرتبطات بالعائلة", WOMAN_FIELDS),
    TableSpec(Tables.LOCATIONS, "المواقع الجغرافية المرتبطة بالعائلة", LOCATION_FIELDS),
    TableSpec(Tables.BRANCHES, "فروع العائلة المختلفة", BRANCH_FIELDS, computed=("path",)),
    TableSpec(Tables.EVENTS, "الأحداث المهمة في تاريخ العائلة", EVENT_FIELDS),
    TableSpec(Tables.WOMEN_LINKS, "علاقات النساء بأفراد العائلة", WOMAN_LINK_FIELDS),
    TableSpec(Tables.AUDIO_FILES, "التسجيلات الصوتية المحفوظة", AUDIO_FIELDS,
              list_fields=_ARCHIVE_LISTS + ("attendees",)),
    TableSpec(Tables.TEXT_DOCUMENTS, "النصوص والوثائق المكتوبة", DOCUMENT_FIELDS,
              list_fields=_ARCHIVE_LISTS + ("dates_mentioned",)),
)}

INSTRUCTIONS = [
    "1. املأ البيانات في الأعمدة المناسبة",
    "2. لا تغير أسماء الأعمدة",
    "3. يمكنك إضافة صفوف جديدة حسب الحاجة",
    "4. احفظ الملف بتنسيق .xlsx",
    "5. قم بتحميل الملف في صفحة الاستيراد",
    "",
    "ملاحظات هامة:",
    "- تأكد من صحة التواريخ بتنسيق YYYY-MM-DD",
    "- تأكد من صحة المعرفات الخارجية (foreign keys)",
    "- القيم المتعددة تفصل بفاصلة",
]


def get_table_spec(name: str) -> TableSpec:
    spec = TABLES.get(name)
    if spec is None:
        raise HTTPException(status_code=404, detail=f"Unknown table: {name}")
    return spec


def to_cell(value: Any) -> Any:
    """Backend value -> something openpyxl can store in a cell"""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return value


def from_cell(value: Any, is_list: bool = False) -> Any:
    """Cell value -> backend value; blank cells become None"""
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        if is_list:
            return [item.strip() for item in value.split(",") if item.strip()]
    return value


def write_sheet(sheet, headers: List[str], rows: Iterable[Iterable[Any]]):
    sheet.append(headers)
    for cell in sheet[1]:
        cell.font = Font(bold=True)
    for row in rows:
        sheet.append([to_cell(value) for value in row])


def workbook_bytes(workbook: Workbook) -> bytes:
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


class SpreadsheetService:
    def __init__(self, backend: Backend):
        self.backend = backend

    def list_tables(self) -> List[SpreadsheetTable]:
        return [
            SpreadsheetTable(
                name=spec.name,
                description=spec.description,
                primary_key=spec.primary_key,
                columns=spec.editable_columns,
                count=self.backend.count(spec.name),
            )
            for spec in TABLES.values()
        ]

    def export_tables(self, names: Optional[List[str]] = None) -> bytes:
        """Workbook with one sheet per table; all registered tables when names is empty"""
        specs = [get_table_spec(name) for name in names] if names else list(TABLES.values())
        workbook = Workbook()
        workbook.remove(workbook.active)
        for spec in specs:
            rows = self.backend.fetch_table(spec.name, order=spec.primary_key)
            headers = []
            for row in rows:
                headers.extend(column for column in row if column not in headers)
            if not headers:
                headers = [spec.primary_key] + spec.editable_columns
            write_sheet(
                workbook.create_sheet(title=spec.name),
                headers,
                ([row.get(column) for column in headers] for row in rows),
            )
            logger.info(f"Exported {len(rows)} rows from {spec.name}")
        return workbook_bytes(workbook)

    def template(self, name: str) -> bytes:
        spec = get_table_spec(name)
        workbook = Workbook()
        data_sheet = workbook.active
        data_sheet.title = DATA_SHEET
        write_sheet(data_sheet, spec.editable_columns, [])
        notes = [f"قالب لاستيراد البيانات إلى جدول {spec.name}"] + INSTRUCTIONS
        write_sheet(workbook.create_sheet(title=INSTRUCTIONS_SHEET), ["تعليمات الاستخدام"], ([n] for n in notes))
        return workbook_bytes(workbook)

    def import_rows(self, name: str, content: bytes) -> ImportResult:
        """Upsert the first sheet of an xlsx file into a table, in batches"""
        spec = get_table_spec(name)
        headers, rows = self._read_first_sheet(content)

        known = set([spec.primary_key] + spec.editable_columns)
        list_columns = set(spec.list_columns)
        ignored = [h for h in headers if h and h not in known and h not in TIMESTAMP_COLUMNS]
        if not any(h in known for h in headers):
            raise HTTPException(status_code=400, detail=f"No column of {spec.name} found in the file")

        records, skipped = [], 0
        for row in rows:
            record = {}
            for header, value in zip(headers, row):
                if header not in known:
                    continue
                value = from_cell(value, is_list=header in list_columns)
                if value is not None:
                    record[header] = value
            if record:
                records.append(record)
            else:
                skipped += 1
        if not records:
            raise HTTPException(status_code=400, detail="The file has no data rows")

        for start in range(0, len(records), IMPORT_BATCH_SIZE):
            self.backend.upsert(spec.name, records[start:start + IMPORT_BATCH_SIZE], on_conflict=spec.primary_key)
        if ignored:
            logger.warning(f"Import into {spec.name} ignored unknown columns: {', '.join(ignored)}")
        logger.info(f"Imported {len(records)} rows into {spec.name}")
        return ImportResult(table=spec.name, imported=len(records), skipped_rows=skipped, ignored_columns=ignored)

    @staticmethod
    def _read_first_sheet(content: bytes) -> Tuple[List[Optional[str]], List[tuple]]:
        try:
            workbook = load_workbook(BytesIO(content), read_only=True, data_only=True)
        except Exception as e:
            logger.warning(f"Unreadable spreadsheet upload: {e}")
            raise HTTPException(status_code=400, detail="The file is not a readable xlsx workbook")
        try:
            rows = list(workbook.worksheets[0].iter_rows(values_only=True))
        finally:
            workbook.close()
        if not rows:
            raise HTTPException(status_code=400, detail="The file is empty")
        headers = [str(cell).strip() if cell is not None else None for cell in rows[0]]
        return headers, rows[1:]
