"""
Database initialization script

Run once to create the verifications indexes:
    python scripts/init_db.py
"""

import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables
load_dotenv()

from app.core.config import settings
from app.core.logging import setup_logging, get_logger
from app.db.mongo import connect_to_mongo, close_mongo_connection, get_verifications_collection
from app.db.indexes import create_indexes

setup_logging()
logger = get_logger("init_db")


async def main():
    logger.info(f"Connecting to MongoDB: {settings.MONGODB_DB_NAME}")
    await connect_to_mongo()

    try:
        await create_indexes()

        verifications = get_verifications_collection()
        indexes = await verifications.index_information()

        print("\n" + "=" * 60)
        print(f"  {settings.MONGODB_DB_NAME}.{settings.VERIFICATIONS_COLLECTION}")
        print("=" * 60)
        for name, info in indexes.items():
            unique = " (unique)" if info.get("unique") else ""
            print(f"  {name}: {info['key']}{unique}")
        print("=" * 60 + "\n")
    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    asyncio.run(main())
