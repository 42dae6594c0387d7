# Supabase tables: user_profiles, roles, pending_person_changes
# This file documents the RPC procedures the administration module relies on

"""
RPC procedures (SECURITY DEFINER, check the caller is an administrator):

- approve_user(user_id uuid, approver_id uuid, new_level text, new_branch_id bigint)
    approval_status -> 'approved', role -> new_level, assigned branch -> new_branch_id,
    approved_at -> now(), approved_by -> approver_id
- reject_user(user_id uuid, approver_id uuid, reason text)
    approval_status -> 'rejected', rejection_reason -> reason
- update_user_role_and_branch(target_user_id uuid, new_level text, new_branch_id bigint, updater_id uuid)
- approve_person_change(p_change_id bigint, p_approver_id uuid)
    applies person_data to الأشخاص (insert or update of original_person_id),
    status -> 'approved', reviewed_by / reviewed_at set
- reject_person_change(p_change_id bigint, p_approver_id uuid, p_reason text)
    status -> 'rejected', rejection_reason -> p_reason

Deleting a user removes the user_profiles row with the anon client and the auth
user with the service-role client (auth.admin.delete_user).
"""
