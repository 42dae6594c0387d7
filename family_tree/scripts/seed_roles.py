"""
Seed Roles Script
This script populates the roles table from the role hierarchy config.
Run manually after creating the database: python -m family_tree.scripts.seed_roles
"""

import sys
import logging

from family_tree.config.permissions_config import get_permission_matrix
from family_tree.core.exceptions import BackendError
from family_tree.database.backend import Backend
from family_tree.database.supabase_client import SupabaseClient
from family_tree.modules.members.mapping import Tables

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_roles(backend: Backend):
    """Create missing roles and refresh the description of existing ones"""
    logger.info("Seeding roles...")

    created_count = 0
    updated_count = 0

    for role in get_permission_matrix()["roles"]:
        try:
            if backend.fetch_one(Tables.ROLES, {"name": role["name"]}, columns="id"):
                backend.update(Tables.ROLES, {"name": role["name"]}, {"description": role["description"]})
                updated_count += 1
                logger.debug(f"Updated role: {role['name']}")
            else:
                backend.insert(Tables.ROLES, {"name": role["name"], "description": role["description"]})
                created_count += 1
                logger.debug(f"Created role: {role['name']}")
        except BackendError as e:
            logger.error(f"Error processing role {role['name']}: {e}")

    logger.info(f"Roles seeded: {created_count} created, {updated_count} updated")
    return created_count + updated_count


def main():
    try:
        # Writes to roles need the service-role key when RLS is enabled
        backend = Backend(SupabaseClient.get_service_client())
        role_count = seed_roles(backend)
        logger.info(f"Seeding completed: {role_count} roles processed")
    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
