"""
Bootstrap Admin Script
Grants the admin role to the account registered under a given email.
There is no self-service path to admin, so the first administrator is
created here. Safe to re-run: an existing grant is left untouched and an
unknown email inserts nothing.

Usage:
    python -m app.scripts.bootstrap_admin admin@example.com
"""

import sys
import argparse
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.database.supabase_client import get_service_supabase
from app.modules.roles.schemas import ADMIN_ROLE
from app.modules.roles.service import RoleService
from supabase import Client
from typing import Optional
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

USERS_PER_PAGE = 200

GRANTED = "granted"
ALREADY_ADMIN = "already_admin"
NOT_FOUND = "not_found"


def find_user_id_by_email(supabase: Client, email: str) -> Optional[str]:
    """Page through auth users (service role only) looking for this email"""
    wanted = email.strip().lower()
    page = 1
    while True:
        users = supabase.auth.admin.list_users(page=page, per_page=USERS_PER_PAGE)
        for user in users:
            if (user.email or "").lower() == wanted:
                return user.id
        if len(users) < USERS_PER_PAGE:
            return None
        page += 1


def bootstrap_admin(supabase: Client, email: str) -> str:
    """Grant admin to the identity behind email. Returns granted, already_admin or not_found."""
    user_id = find_user_id_by_email(supabase, email)
    if user_id is None:
        logger.warning(f"User with email {email} not found. Please ensure the user has signed up first.")
        return NOT_FOUND

    roles = RoleService(supabase)
    if roles.get_grant(user_id, ADMIN_ROLE) is not None:
        logger.info(f"User {email} is already an admin")
        return ALREADY_ADMIN

    roles.grant_role(user_id, ADMIN_ROLE)
    logger.info(f"Admin role assigned to user {email}")
    return GRANTED


def main(argv=None):
    """Main function to bootstrap the first administrator"""
    parser = argparse.ArgumentParser(description="Grant the admin role to a registered user")
    parser.add_argument("email", help="Email address the user signed up with")
    args = parser.parse_args(argv)

    try:
        supabase = get_service_supabase()
        logger.info(f"Bootstrapping admin for {args.email}...")
        bootstrap_admin(supabase, args.email)
    except Exception as e:
        logger.error(f"Error during admin bootstrap: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
