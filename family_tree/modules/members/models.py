# Supabase tables: الأشخاص, عرض_الأشخاص_كامل (view), الأحداث, ارتباط_النساء, pending_person_changes
# This file documents the expected database schema
# Column names are translated to English field names in mapping.py

"""
Expected Supabase table structure:

الأشخاص (persons, male line):
- id: bigint (primary key)
- الاسم_الأول: text (not null) - first name
- is_root: boolean (default: false)
- تاريخ_الميلاد / تاريخ_الوفاة: date (nullable) - birth / death date
- مكان_الميلاد / مكان_الوفاة: bigint (nullable, foreign key to المواقع)
- رقم_هوية_وطنية: text (nullable, unique when set) - national id
- الجنس: text ('ذكر' | 'أنثى')
- الحالة_الاجتماعية: text ('أعزب' | 'متزوج' | 'مطلق' | 'أرمل')
- المنصب: text (nullable) - position
- مستوى_التعليم: text (nullable) - education level
- father_id: bigint (nullable, foreign key to الأشخاص.id) - tree parent
- mother_id: bigint (nullable)
- معرف_الفرع: bigint (nullable, foreign key to الفروع)
- path: ltree (maintained by trigger from father_id)
- صورة_شخصية: text (nullable) - photo url
- ملاحظات: text (nullable) - notes
- تاريخ_الإنشاء / تاريخ_التحديث: timestamp

عرض_الأشخاص_كامل (view): الأشخاص plus
- الاسم_الكامل (full name), مستوى_الجيل (generation, 1 = root)
- اسم_الأب, اسم_الجد, اسم_العائلة (father / grandfather / family name)
- اسم_الفرع (branch name), مكان_الميلاد / مكان_الوفاة resolved to place text

الأحداث (events / achievements):
- معرف_الحدث: bigint (primary key)
- معرف_الشخص: bigint (foreign key to الأشخاص.id)

ارتباط_النساء (links between persons and women):
- person_id: bigint (foreign key to الأشخاص.id)
- woman id: bigint (foreign key to النساء.id)
- نوع_الارتباط: text - 'زوجة' for a wife

pending_person_changes (written by submit_person_change):
- id: bigint (primary key)
- change_type: text ('insert' | 'update')
- original_person_id: bigint (nullable)
- person_data: jsonb (backend column names)
- submitted_by: uuid
- status: text ('pending' | 'approved' | 'rejected')
- reviewed_by: uuid (nullable), reviewed_at: timestamp (nullable)
- rejection_reason: text (nullable)
- created_at: timestamp (default: now())

RPC procedures:
- submit_person_change(p_change_type, p_original_person_id, p_person_data) -> -1 when applied, else change id
- get_descendants(person_id), get_ancestors(person_id), get_siblings(person_id)
- get_descendants_tree(root_person_id, max_depth)
"""
