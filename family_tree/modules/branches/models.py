# Supabase tables: الفروع, المواقع
# This file documents the expected database schema
# Column names are translated to English field names in members/mapping.py

"""
Expected Supabase table structure:

الفروع (branches):
- معرف_الفرع: bigint (primary key)
- اسم_الفرع: text (not null) - branch name
- وصف_الفرع: text (nullable) - description
- الفرع_الأصل: bigint (nullable, foreign key to الفروع.معرف_الفرع) - parent branch
- معرف_الموقع: bigint (nullable, foreign key to المواقع.معرف_الموقع)
- تاريخ_التأسيس: date (nullable) - founded on
- مسار_الفرع: text (nullable) - branch path
- ملاحظات: text (nullable)
- تاريخ_الإنشاء / تاريخ_التحديث: timestamp

المواقع (locations):
- معرف_الموقع: bigint (primary key)
- الدولة: text (not null) - country
- المنطقة: text (nullable) - region
- المدينة: text (nullable) - city
- تفاصيل_إضافية: text (nullable) - details
- تاريخ_الإنشاء / تاريخ_التحديث: timestamp
"""
