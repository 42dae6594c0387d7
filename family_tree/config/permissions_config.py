"""
Roles and Permissions Configuration
This config defines the role hierarchy of the family tree and the permissions
each role carries. Role assignment itself lives in the backend (user_profiles.role_id);
this file only decides what an assigned role may do.
"""
from typing import Dict, List

# Wildcard permission: the role may do everything
ALL_PERMISSIONS = "*"

# Role definitions, ordered from least to most privileged
ROLES = {
    "viewer": {
        "level": 1,
        "permissions": ["read"],
        "display_name": "مشاهد (قديم)",
        "description": "Legacy read-only access"
    },
    "family_member": {
        "level": 2,
        "permissions": ["read", "view_approved"],
        "display_name": "عضو عائلة",
        "description": "Family member with access to approved records"
    },
    "content_writer": {
        "level": 3,
        "permissions": ["read", "write", "create_content"],
        "display_name": "كاتب محتوى",
        "description": "Writes content; data changes go through approval"
    },
    "level_manager": {
        "level": 4,
        "permissions": ["read", "write", "manage_branch", "edit_branch_data"],
        "display_name": "مدير فرع",
        "description": "Manages the records of an assigned branch"
    },
    "editor": {
        "level": 5,
        "permissions": ["read", "write", "edit"],
        "display_name": "محرر (قديم)",
        "description": "Legacy editor role"
    },
    "admin": {
        "level": 6,
        "permissions": [ALL_PERMISSIONS],
        "display_name": "مدير (قديم)",
        "description": "Legacy administrator role"
    },
    "family_secretary": {
        "level": 7,
        "permissions": [ALL_PERMISSIONS],
        "display_name": "أمين العائلة",
        "description": "Family secretary with full access"
    }
}

# Every concrete permission a role can hold
PERMISSIONS = {
    "read": "Read family records",
    "view_approved": "View approved family records",
    "write": "Submit record changes",
    "edit": "Edit records",
    "create_content": "Create content",
    "manage_branch": "Manage an assigned branch",
    "edit_branch_data": "Edit the records of an assigned branch",
}


def get_role_level(role_name: str) -> int:
    """Return hierarchy level of a role; unknown roles have level 0."""
    role = ROLES.get(role_name)
    return role["level"] if role else 0


def get_role_permissions(role_name: str) -> List[str]:
    """Return concrete permission names for a role, expanding the wildcard."""
    role = ROLES.get(role_name)
    if not role:
        return []
    if ALL_PERMISSIONS in role["permissions"]:
        return sorted(PERMISSIONS)
    return list(role["permissions"])


def has_permission(role_name: str, permission: str) -> bool:
    role = ROLES.get(role_name)
    if not role:
        return False
    return ALL_PERMISSIONS in role["permissions"] or permission in role["permissions"]


def has_unrestricted_access(role_name: str) -> bool:
    """True for roles whose writes apply immediately without approval."""
    role = ROLES.get(role_name)
    return bool(role) and ALL_PERMISSIONS in role["permissions"]


def can_access(role_name: str, required_role: str) -> bool:
    """True when role_name sits at or above required_role in the hierarchy."""
    return get_role_level(role_name) >= get_role_level(required_role)


def get_display_name(role_name: str) -> str:
    role = ROLES.get(role_name)
    return role["display_name"] if role else role_name


def get_permission_matrix() -> Dict[str, List[Dict]]:
    """
    Returns all permissions and roles
    Format: {
        "permissions": [{"name": "read", "description": "..."}, ...],
        "roles": [{"name": "viewer", "level": 1, "permissions": ["read"], ...}, ...]
    }
    """
    permissions = [
        {"name": name, "description": description}
        for name, description in PERMISSIONS.items()
    ]
    roles = []
    for role_name, role_config in ROLES.items():
        roles.append({
            "name": role_name,
            "level": role_config["level"],
            "display_name": role_config["display_name"],
            "description": role_config["description"],
            "permissions": get_role_permissions(role_name)
        })
    return {
        "permissions": permissions,
        "roles": roles
    }
