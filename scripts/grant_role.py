"""
Grant or revoke a role on an existing profile.

Profiles are provisioned on a user's first authenticated request; run this
afterwards to promote an editor to administrator (or demote them).
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from newsdesk.db import DbClient, ProfileRecord
from newsdesk.dependencies import get_db_client
from newsdesk.errors import NewsdeskError
from newsdesk.identity import Role


logger = logging.getLogger(__name__)


def find_profile(db: DbClient, user: str) -> Optional[ProfileRecord]:
    """Look a profile up by id, falling back to a case-insensitive email match."""
    profile = db.get_profile(user)
    if profile:
        return profile
    wanted = user.strip().lower()
    for candidate in db.list_profiles():
        if candidate.email.lower() == wanted:
            return candidate
    return None


def apply_role(db: DbClient, user: str, role: Role, *, revoke: bool) -> bool:
    profile = find_profile(db, user)
    if profile is None:
        logger.error("No profile found for %s", user)
        return False
    if revoke:
        db.remove_role(profile.id, role)
        logger.info("Revoked %s from %s (%s)", role.value, profile.email, profile.id)
    else:
        db.add_role(profile.id, role)
        logger.info("Granted %s to %s (%s)", role.value, profile.email, profile.id)
    return True


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Grant or revoke a profile role")
    parser.add_argument("user", help="Profile id or email address")
    parser.add_argument(
        "--role",
        choices=[role.value for role in Role],
        default=Role.ADMIN.value,
        help="Role to grant (default: admin)",
    )
    parser.add_argument(
        "--revoke",
        action="store_true",
        help="Remove the role instead of granting it",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")
    db = get_db_client()
    try:
        ok = apply_role(db, args.user, Role(args.role), revoke=args.revoke)
    except NewsdeskError as exc:
        logger.error("Role change failed: %s", exc)
        return 1
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
