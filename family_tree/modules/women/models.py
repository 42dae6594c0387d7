# Supabase table: النساء
# This file documents the expected database schema

"""
Expected Supabase table structure:

النساء (women married into or born to the family):
- id: bigint (primary key)
- الاسم_الأول: text (not null) - first name
- اسم_الأب / اسم_العائلة: text (nullable) - father / family name
- تاريخ_الميلاد / تاريخ_الوفاة: date (nullable)
- مكان_الميلاد / مكان_الوفاة: bigint (nullable, foreign key to المواقع)
- رقم_هوية_وطنية: text (nullable, unique when set)
- الحالة_الاجتماعية: text ('عزباء' | 'متزوجة' | 'مطلقة' | 'أرملة')
- المنصب, مستوى_التعليم: text (nullable)
- معرف_الفرع: bigint (nullable, foreign key to الفروع)
- صورة_شخصية, ملاحظات: text (nullable)
- تاريخ_الإنشاء / تاريخ_التحديث: timestamp

ارتباط_النساء (written when a married woman is linked to a person):
- woman_id, person_id: bigint
- نوع_الارتباط: text ('زوجة')
- السبب_أو_الحدث: text, تاريخ_الحدث: date, أهمية_الحدث: text
"""
