from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
import settings
import logging


class DataBase:
    client: AsyncIOMotorClient = None   # type: ignore
    graphstaff: AsyncIOMotorDatabase = None   # type: ignore


db = DataBase()


async def connect_to_mongo():
    logging.info("Connecting to mongo...")
    db.client = AsyncIOMotorClient(settings.MONGODB_URI,
                                   maxPoolSize=10,
                                   minPoolSize=10)
    db.graphstaff = db.client[settings.MONGODB_DATABASE]
    await ensure_indexes(db.graphstaff)
    logging.info("connected to %s...", settings.MONGODB_DATABASE)
    return db.graphstaff


async def close_mongo_connection():
    logging.info("closing connection...")
    if db.client is not None:
        db.client.close()
    logging.info("closed connection")


async def ensure_indexes(database):
    """
    Create the indexes the directory relies on (idempotent)
    """
    await database["users"].create_index("username", unique=True)
    await database["users"].create_index("email", unique=True)
    await database["employees"].create_index("name")
    await database["employees"].create_index("class")
    await database["employees"].create_index(
        [("class", ASCENDING), ("attendance", DESCENDING)]
    )
