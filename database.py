# database.py
"""
Gainsly MongoDB connection.

One Motor client per process; Beanie is bound to the Gainsly database the
first time a connection succeeds.
"""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from beanie import init_beanie
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class Database:
    """Holds the process-wide Motor client and Beanie state."""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None
    _initialized: bool = False

    @classmethod
    async def connect_db(cls, database_url: str, database_name: str) -> None:
        """
        Open the Motor client, check it with a ping and register the documents.

        Calling it again after success is a no-op.

        Raises:
            Exception: Whatever Motor raises when the server is unreachable.
        """
        if cls._initialized:
            return

        client = AsyncIOMotorClient(database_url, serverSelectionTimeoutMS=5000)
        try:
            await client.admin.command("ping")
        except Exception as e:
            client.close()
            logger.error(f"MongoDB ping failed for {database_name}: {e}")
            raise

        cls.client = client
        logger.info(f"Connected to MongoDB database '{database_name}'")
        await cls.init_models(client[database_name])

    @classmethod
    async def ensure_connected(cls, database_url: str, database_name: str) -> bool:
        """Connect if needed. Returns False instead of raising when MongoDB is down."""
        if cls._initialized:
            return True
        try:
            await cls.connect_db(database_url, database_name)
        except Exception as e:
            logger.error(f"Database still unavailable: {e}")
            return False
        return True

    @classmethod
    async def init_models(cls, database: AsyncIOMotorDatabase) -> None:
        """Bind every Gainsly document to ``database`` and build its indexes."""
        from gainsly.models.mongodb import DOCUMENT_MODELS

        await init_beanie(database=database, document_models=DOCUMENT_MODELS)
        cls.db = database
        cls._initialized = True
        logger.info(f"Beanie ready with {len(DOCUMENT_MODELS)} document models")

    @classmethod
    async def close_db(cls) -> None:
        if cls.client:
            cls.client.close()
            logger.info("MongoDB connection closed")
        cls.client = None
        cls.db = None
        cls._initialized = False

    @classmethod
    async def ping(cls) -> bool:
        """True when the server answers a ping."""
        if not cls.client:
            return False
        try:
            await cls.client.admin.command("ping")
        except Exception as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False
        return True
