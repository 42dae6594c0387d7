# Supabase tables: الملفات_الصوتية, النصوص_والوثائق
# This file documents the expected database schema

"""
Expected Supabase table structure:

الملفات_الصوتية (recorded interviews, oral histories, poetry):
- معرف_الملف_الصوتي: bigint (primary key)
- عنوان_التسجيل: text (not null), وصف_التسجيل: text
- نوع_التسجيل: text ('مقابلة_شخصية' | 'قصة_شفهية' | 'شعر_وأدب' | ... | 'أخرى')
- مسار_الملف: text (not null), نوع_الملف: text ('mp3' | 'wav' | 'ogg' | 'm4a' | 'aac')
- حجم_الملف: bigint (bytes)
- مدة_التسجيل: interval (written as 'M:SS')
- جودة_التسجيل: text
- تاريخ_التسجيل: date, مكان_التسجيل_النصي: text
- الحضور: text[], النص_المكتوب: text, ملخص_المحتوى: text
- أهمية_التسجيل: text ('عالية' | 'متوسطة' | 'عادية'), مصدر_التسجيل: text

النصوص_والوثائق (letters, memoirs, deeds, certificates):
- معرف_النص: bigint (primary key)
- عنوان_النص: text (not null), وصف_النص: text
- نوع_النص: text ('قصة_مكتوبة' | 'مذكرات_شخصية' | 'وثيقة_رسمية' | ... | 'أخرى')
- النص_الكامل: text (not null), ملخص_النص: text
- الكلمات_الافتتاحية / الكلمات_الختامية: text (first / last 100 characters by default)
- عدد_الصفحات: int, عدد_الكلمات: int (computed from النص_الكامل)
- تاريخ_الكتابة: date, مكان_الكتابة_النصي: text
- الكاتب_الأصلي, المستقبل: text
- التواريخ_المذكورة: text[]
- أهمية_النص: text ('عالية' | 'متوسطة' | 'عادية'), مصدر_النص: text, ملاحظات_عامة: text

Both tables also carry:
- مسار_الملف, نوع_الملف: text
- معرف_الشخص, معرف_المرأة, معرف_الحدث, معرف_المكان: bigint (nullable foreign keys)
- المناسبة, اللغة, اللهجة: text
- الكلمات_المفتاحية, الشخصيات_المذكورة, الأماكن_المذكورة: text[]
- مستوى_الوضوح: text ('ممتاز' | 'جيد' | 'متوسط' | 'ضعيف')
- حالة_الحفظ: text ('ممتازة' | 'جيدة' | 'متوسطة' | 'تحتاج_ترميم')
- هو_عام: boolean
- تاريخ_الإنشاء / تاريخ_التحديث: timestamp
"""
