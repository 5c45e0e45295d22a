from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
import structlog

from teamup.config import MONGO_URI, DATABASE_NAME

logger = structlog.get_logger()

client = None
db = None


async def connect_to_mongo():
    global client, db

    if not MONGO_URI:
        raise ValueError("MONGO_URI environment variable is not set! Check your .env file.")

    client = AsyncIOMotorClient(MONGO_URI)
    db = client[DATABASE_NAME]
    await client.admin.command('ping')

    logger.info(
        "mongo_connected",
        database=DATABASE_NAME,
        atlas="mongodb+srv" in MONGO_URI,
    )

    await ensure_indexes(db)


async def ensure_indexes(database):
    """Create the indexes the workflows rely on."""
    await database.users.create_index("email", unique=True)
    await database.users.create_index("username", unique=True)
    await database.tokens.create_index("refresh_token", unique=True)

    # One pending application per (project, slot, user)
    await database.applications.create_index(
        [("project_id", ASCENDING), ("slot_id", ASCENDING), ("user_id", ASCENDING)],
        unique=True,
        partialFilterExpression={"status": "pending"},
        name="uniq_pending_application",
    )
    await database.applications.create_index([("user_id", ASCENDING), ("applied_at", DESCENDING)])

    await database.projects.create_index([("owner_id", ASCENDING), ("created_at", DESCENDING)])
    await database.posts.create_index([("author_id", ASCENDING), ("created_at", DESCENDING)])
    await database.comments.create_index("post_id")
    await database.reports.create_index(
        [("reporter_id", ASCENDING), ("report_type", ASCENDING), ("content_id", ASCENDING)]
    )

    logger.info("mongo_indexes_ready")


async def close_mongo_connection():
    if client:
        client.close()
        logger.info("mongo_disconnected")


def get_db():
    return db
