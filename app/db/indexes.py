"""
app/db/indexes.py

Purpose: Database index management

- Unique (phone, version) index: the conditional write every
  concurrent issuance race is resolved by
- Recency index for rate-limit lookups
"""

from pymongo import ASCENDING, DESCENDING

from app.db.mongo import get_verifications_collection
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes():
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        verifications = get_verifications_collection()

        logger.info("Creating database indexes...")

        # Exactly one document per (phone, version). insert_one of an existing
        # pair raises DuplicateKeyError, which the repository reports as a conflict.
        await verifications.create_index(
            [("phone", ASCENDING), ("version", ASCENDING)],
            unique=True,
            name="phone_version_unique"
        )
        logger.debug("Created unique index on verifications.phone + version")

        await verifications.create_index(
            [("phone", ASCENDING), ("created", DESCENDING)],
            name="phone_created_idx"
        )
        logger.debug("Created index on verifications.phone + created")

        indexes = await verifications.index_information()
        logger.info(f"All database indexes created successfully (verifications={len(indexes)})")

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise


if __name__ == "__main__":
    """
    Run this script directly to create indexes manually.
    """
    import asyncio
    from app.db.mongo import connect_to_mongo, close_mongo_connection

    async def main():
        await connect_to_mongo()
        await create_indexes()
        await close_mongo_connection()

    asyncio.run(main())
