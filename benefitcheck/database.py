from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from benefitcheck.config import settings


class MongoDB:
    client: AsyncIOMotorClient = None
    database: AsyncIOMotorDatabase = None


db = MongoDB()


async def connect_to_mongo():
    """Create database connection"""
    # tz_aware so stored timestamps compare cleanly with the engine clock
    db.client = AsyncIOMotorClient(settings.mongodb_url, tz_aware=True)
    db.database = db.client[settings.mongodb_db_name]


async def close_mongo_connection():
    """Close database connection"""
    if db.client:
        db.client.close()


async def ping() -> bool:
    """Check MongoDB connection health"""
    if db.client is None:
        return False
    try:
        await db.client.admin.command("ping")
        return True
    except Exception:
        return False


def get_database() -> AsyncIOMotorDatabase:
    return db.database
