# Supabase table: الأحداث
# This file documents the expected database schema

"""
Expected Supabase table structure:

الأحداث (life events of a family member):
- معرف_الحدث: bigint (primary key)
- معرف_الشخص: bigint (nullable, foreign key to الأشخاص.id)
- معرف_المرأة: bigint (nullable, foreign key to النساء.id)
- نوع_الحدث: text ('ميلاد' | 'وفاة' | 'زواج' | 'طلاق' | 'تخرج' | 'ترقية' | 'انتقال'
  | 'إنجاز' | 'حج' | 'عمرة' | 'سفر' | 'مرض' | 'شفاء' | 'أخرى')
- عنوان_الحدث: text (not null)
- وصف_الحدث: text (nullable)
- تاريخ_الحدث: date (not null)
- مكان_الحدث: bigint (nullable, foreign key to المواقع.معرف_الموقع)
- أهمية_الحدث: text ('عالية' | 'متوسطة' | 'عادية', default 'عادية')
- هو_عام: boolean (default false)
- تاريخ_الإنشاء / تاريخ_التحديث: timestamp

An event belongs to exactly one of a person or a woman.
"""
