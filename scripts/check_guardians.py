"""
Report guardian accounts whose mother_for is missing or unrecognised.

These accounts get an empty discovery deck and cannot swipe until the
field is repaired. The script only reports; it never fills in a value.

    python -m scripts.check_guardians
"""
import sys

from loguru import logger

from zawaj.core.db import SessionLocal
from zawaj.core.logging import setup_logging
from zawaj.modules.guardian.policy import guardians_missing_ward
from zawaj.services.profile_store import ProfileStore


def main() -> int:
    setup_logging()
    db = SessionLocal()
    try:
        broken = guardians_missing_ward(ProfileStore(db))
    finally:
        db.close()

    if not broken:
        logger.info("All guardian accounts declare mother_for")
        return 0

    for user in broken:
        logger.warning(
            f"guardian {user.id} ({user.email or 'no email'}) has mother_for={user.mother_for!r}"
        )
    logger.warning(f"{len(broken)} guardian account(s) need mother_for set")
    return 1


if __name__ == "__main__":
    sys.exit(main())
