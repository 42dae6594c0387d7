# Supabase Auth + profile tables
# This module uses Supabase's built-in authentication system (auth.users)
# Profiles, roles and approval state live in public tables documented below

"""
Expected Supabase table structure:

roles:
- id: uuid (primary key)
- name: text (unique) - family_secretary, admin, level_manager, content_writer,
  editor, family_member, viewer
- description: text (nullable)

user_profiles:
- id: uuid (primary key, references auth.users.id)
- email: text (not null)
- full_name: text (nullable)
- role_id: uuid (foreign key to roles.id)
- approval_status: text (not null, default: 'pending') - pending, approved, rejected
- assigned_branch_id: bigint (nullable, foreign key to الفروع.معرف_الفرع)
- approved_at: timestamp (nullable)
- approved_by: uuid (nullable)
- rejection_reason: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

user_profile_safe (view):
- user_profiles columns joined with roles.name as role_name

RPC procedures (security definer, check the caller is an administrator):
- approve_user(user_id, approver_id, new_level, new_branch_id)
- reject_user(user_id, approver_id, reason)
- update_user_role_and_branch(target_user_id, new_level, new_branch_id, updater_id)
"""
