"""
Mapping between backend rows and typed records.

The backend names tables and columns in Arabic. Everything outside this
module works with English field names; rows are translated on the way in and
out, and unknown columns are dropped.
"""
from typing import Any, Dict, Mapping, Optional


class Tables:
    PERSONS = "الأشخاص"
    PERSONS_DETAILS = "عرض_الأشخاص_كامل"
    WOMEN = "النساء"
    BRANCHES = "الفروع"
    LOCATIONS = "المواقع"
    EVENTS = "الأحداث"
    WOMEN_LINKS = "ارتباط_النساء"
    NOTABLES = "notables"
    NEWS_POSTS = "news_posts"
    AUDIO_FILES = "الملفات_الصوتية"
    TEXT_DOCUMENTS = "النصوص_والوثائق"
    USER_PROFILES = "user_profiles"
    USER_PROFILES_SAFE = "user_profile_safe"
    ROLES = "roles"
    PENDING_PERSON_CHANGES = "pending_person_changes"


class FieldMap:
    """Bidirectional column map: English field name <-> backend column name."""

    def __init__(self, fields: Mapping[str, str], converters: Optional[Mapping[str, "ValueMap"]] = None):
        self.fields = dict(fields)
        self.columns = {column: name for name, column in self.fields.items()}
        self.converters = dict(converters or {})

    def column(self, field_name: str) -> str:
        return self.fields[field_name]

    def to_record(self, row: Mapping[str, Any]) -> Dict[str, Any]:
        """Translate a backend row into a dict keyed by English field names."""
        record = {}
        for column, value in row.items():
            name = self.columns.get(column)
            if name is None:
                continue
            converter = self.converters.get(name)
            record[name] = converter.to_api(value) if converter else value
        return record

    def to_row(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        """Translate English-keyed values into a backend row; unknown fields are ignored."""
        row = {}
        for name, value in record.items():
            column = self.fields.get(name)
            if column is None:
                continue
            converter = self.converters.get(name)
            row[column] = converter.to_backend(value) if converter else value
        return row

    def extend(self, fields: Mapping[str, str], converters: Optional[Mapping[str, "ValueMap"]] = None) -> "FieldMap":
        merged_converters = dict(self.converters)
        merged_converters.update(converters or {})
        return FieldMap({**self.fields, **fields}, merged_converters)


class ValueMap:
    """Maps stored enumeration values to API values. Several stored values may map to one API value."""

    def __init__(self, stored_to_api: Mapping[str, str], api_to_stored: Mapping[str, str]):
        self.stored_to_api = dict(stored_to_api)
        self.api_to_stored = dict(api_to_stored)

    def to_api(self, value):
        if value is None:
            return None
        return self.stored_to_api.get(value, value)

    def to_backend(self, value):
        if value is None:
            return None
        value = getattr(value, "value", value)
        return self.api_to_stored.get(value, value)


GENDER = ValueMap(
    {"ذكر": "male", "أنثى": "female"},
    {"male": "ذكر", "female": "أنثى"},
)

MEN_MARITAL_STATUS = ValueMap(
    {"أعزب": "single", "متزوج": "married", "مطلق": "divorced", "أرمل": "widowed"},
    {"single": "أعزب", "married": "متزوج", "divorced": "مطلق", "widowed": "أرمل"},
)

WOMEN_MARITAL_STATUS = ValueMap(
    {"عزباء": "single", "متزوجة": "married", "مطلقة": "divorced", "أرملة": "widowed"},
    {"single": "عزباء", "married": "متزوجة", "divorced": "مطلقة", "widowed": "أرملة"},
)

PERSON_FIELDS = FieldMap(
    {
        "id": "id",
        "first_name": "الاسم_الأول",
        "is_root": "is_root",
        "birth_date": "تاريخ_الميلاد",
        "death_date": "تاريخ_الوفاة",
        "birth_place_id": "مكان_الميلاد",
        "death_place_id": "مكان_الوفاة",
        "national_id": "رقم_هوية_وطنية",
        "gender": "الجنس",
        "marital_status": "الحالة_الاجتماعية",
        "position": "المنصب",
        "education_level": "مستوى_التعليم",
        "father_id": "father_id",
        "mother_id": "mother_id",
        "branch_id": "معرف_الفرع",
        "path": "path",
        "photo_url": "صورة_شخصية",
        "notes": "ملاحظات",
        "created_at": "تاريخ_الإنشاء",
        "updated_at": "تاريخ_التحديث",
    },
    {"gender": GENDER, "marital_status": MEN_MARITAL_STATUS},
)

# The details view resolves place ids to place names under the same column names
PERSON_DETAILS_FIELDS = PERSON_FIELDS.extend({
    "full_name": "الاسم_الكامل",
    "generation": "مستوى_الجيل",
    "father_name": "اسم_الأب",
    "grandfather_name": "اسم_الجد",
    "family_name": "اسم_العائلة",
    "branch_name": "اسم_الفرع",
    "birth_place": "مكان_الميلاد",
    "death_place": "مكان_الوفاة",
})

WOMAN_FIELDS = FieldMap(
    {
        "id": "id",
        "first_name": "الاسم_الأول",
        "father_name": "اسم_الأب",
        "family_name": "اسم_العائلة",
        "birth_date": "تاريخ_الميلاد",
        "death_date": "تاريخ_الوفاة",
        "birth_place_id": "مكان_الميلاد",
        "death_place_id": "مكان_الوفاة",
        "national_id": "رقم_هوية_وطنية",
        "marital_status": "الحالة_الاجتماعية",
        "position": "المنصب",
        "education_level": "مستوى_التعليم",
        "branch_id": "معرف_الفرع",
        "photo_url": "صورة_شخصية",
        "notes": "ملاحظات",
        "created_at": "تاريخ_الإنشاء",
        "updated_at": "تاريخ_التحديث",
    },
    {"marital_status": WOMEN_MARITAL_STATUS},
)

BRANCH_FIELDS = FieldMap({
    "id": "معرف_الفرع",
    "name": "اسم_الفرع",
    "description": "وصف_الفرع",
    "parent_id": "الفرع_الأصل",
    "location_id": "معرف_الموقع",
    "founded_on": "تاريخ_التأسيس",
    "path": "مسار_الفرع",
    "notes": "ملاحظات",
    "created_at": "تاريخ_الإنشاء",
    "updated_at": "تاريخ_التحديث",
})

LOCATION_FIELDS = FieldMap({
    "id": "معرف_الموقع",
    "country": "الدولة",
    "region": "المنطقة",
    "city": "المدينة",
    "details": "تفاصيل_إضافية",
    "created_at": "تاريخ_الإنشاء",
    "updated_at": "تاريخ_التحديث",
})

IMPORTANCE = ValueMap(
    {"عالية": "high", "متوسطة": "medium", "عادية": "normal"},
    {"high": "عالية", "medium": "متوسطة", "normal": "عادية"},
)

EVENT_TYPE = ValueMap(
    {
        "ميلاد": "birth", "وفاة": "death", "زواج": "marriage", "طلاق": "divorce",
        "تخرج": "graduation", "ترقية": "promotion", "انتقال": "relocation", "إنجاز": "achievement",
        "حج": "hajj", "عمرة": "umrah", "سفر": "travel", "مرض": "illness", "شفاء": "recovery",
        "أخرى": "other",
    },
    {
        "birth": "ميلاد", "death": "وفاة", "marriage": "زواج", "divorce": "طلاق",
        "graduation": "تخرج", "promotion": "ترقية", "relocation": "انتقال", "achievement": "إنجاز",
        "hajj": "حج", "umrah": "عمرة", "travel": "سفر", "illness": "مرض", "recovery": "شفاء",
        "other": "أخرى",
    },
)

EVENT_FIELDS = FieldMap(
    {
        "id": "معرف_الحدث",
        "person_id": "معرف_الشخص",
        "woman_id": "معرف_المرأة",
        "event_type": "نوع_الحدث",
        "title": "عنوان_الحدث",
        "description": "وصف_الحدث",
        "event_date": "تاريخ_الحدث",
        "location_id": "مكان_الحدث",
        "importance": "أهمية_الحدث",
        "is_public": "هو_عام",
        "created_at": "تاريخ_الإنشاء",
        "updated_at": "تاريخ_التحديث",
    },
    {"event_type": EVENT_TYPE, "importance": IMPORTANCE},
)

# Columns shared by the audio and text archives
_ARCHIVE_COMMON = {
    "file_path": "مسار_الملف",
    "file_type": "نوع_الملف",
    "person_id": "معرف_الشخص",
    "woman_id": "معرف_المرأة",
    "event_id": "معرف_الحدث",
    "location_id": "معرف_المكان",
    "occasion": "المناسبة",
    "language": "اللغة",
    "dialect": "اللهجة",
    "keywords": "الكلمات_المفتاحية",
    "people_mentioned": "الشخصيات_المذكورة",
    "places_mentioned": "الأماكن_المذكورة",
    "clarity": "مستوى_الوضوح",
    "preservation": "حالة_الحفظ",
    "is_public": "هو_عام",
    "created_at": "تاريخ_الإنشاء",
    "updated_at": "تاريخ_التحديث",
}

AUDIO_FIELDS = FieldMap(
    {
        "id": "معرف_الملف_الصوتي",
        "title": "عنوان_التسجيل",
        "description": "وصف_التسجيل",
        "recording_type": "نوع_التسجيل",
        "file_size": "حجم_الملف",
        "duration": "مدة_التسجيل",
        "quality": "جودة_التسجيل",
        "recorded_on": "تاريخ_التسجيل",
        "recording_place": "مكان_التسجيل_النصي",
        "attendees": "الحضور",
        "transcript": "النص_المكتوب",
        "summary": "ملخص_المحتوى",
        "importance": "أهمية_التسجيل",
        "source": "مصدر_التسجيل",
        **_ARCHIVE_COMMON,
    },
    {"importance": IMPORTANCE},
)

DOCUMENT_FIELDS = FieldMap(
    {
        "id": "معرف_النص",
        "title": "عنوان_النص",
        "description": "وصف_النص",
        "document_type": "نوع_النص",
        "full_text": "النص_الكامل",
        "summary": "ملخص_النص",
        "opening_words": "الكلمات_الافتتاحية",
        "closing_words": "الكلمات_الختامية",
        "page_count": "عدد_الصفحات",
        "word_count": "عدد_الكلمات",
        "written_on": "تاريخ_الكتابة",
        "writing_place": "مكان_الكتابة_النصي",
        "original_author": "الكاتب_الأصلي",
        "recipient": "المستقبل",
        "dates_mentioned": "التواريخ_المذكورة",
        "importance": "أهمية_النص",
        "source": "مصدر_النص",
        "notes": "ملاحظات_عامة",
        **_ARCHIVE_COMMON,
    },
    {"importance": IMPORTANCE},
)

WOMAN_LINK_FIELDS = FieldMap({
    "id": "id",
    "person_id": "person_id",
    "woman_id": "woman_id",
    "link_type": "نوع_الارتباط",
    "reason": "السبب_أو_الحدث",
    "event_date": "تاريخ_الحدث",
    "importance": "أهمية_الحدث",
})

# Stored value of a wife link in the women-links table
WIFE_LINK = "زوجة"

NOTABLE_COLUMNS = (
    "id", "category", "biography", "education", "positions",
    "publications", "contact_info", "legacy", "profile_picture_url",
)
