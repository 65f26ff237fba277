"""
Seed Profile Script
Inserts the built-in default profile when the profiles table is empty, so the
admin editor starts from a stored row. Safe to run repeatedly.
"""

import sys
import logging
from typing import Optional

from supabase import Client

from portfolio.core.errors import PortfolioError
from portfolio.database.supabase_client import get_supabase
from portfolio.modules.profile.schemas import PROFILE_RESOURCE
from portfolio.modules.resources.repository import ResourceRepository

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_profile(supabase: Client) -> Optional[str]:
    """Create the default profile if none exists. Returns the new id, or None when one was already there."""
    repository = ResourceRepository(supabase, PROFILE_RESOURCE)
    existing = repository.first()
    if existing is not None:
        logger.info(f"Profile already present ({existing.id}), nothing to seed")
        return None

    draft = PROFILE_RESOURCE.empty_draft()
    errors = PROFILE_RESOURCE.validate(draft)
    if errors:
        raise PortfolioError(f"Default profile is incomplete: {'; '.join(errors)}")
    record = repository.create(PROFILE_RESOURCE.to_payload(draft))
    logger.info(f"Seeded default profile {record.id}")
    return record.id


def main():
    """Main function to seed the default profile"""
    try:
        supabase = get_supabase()
        logger.info("Starting profile seeding...")
        seed_profile(supabase)
        logger.info("Seeding completed successfully!")
    except PortfolioError as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
