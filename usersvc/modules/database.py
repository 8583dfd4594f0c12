import logging
import os
from dataclasses import dataclass
from urllib.parse import quote_plus

from dotenv import load_dotenv
from pymongo import AsyncMongoClient

load_dotenv()

logger = logging.getLogger("usersvc.database")

USERS_COLLECTION = "users"


@dataclass
class DatabaseOptions:
    """Connection settings for the document store."""
    hostname: str = "localhost"
    port: int = 27017
    db: str = "api"
    username: str = ""
    password: str = ""

    @classmethod
    def from_env(cls) -> "DatabaseOptions":
        """Read options from the environment (and .env), keeping the defaults for unset keys."""
        return cls(
            hostname=os.getenv("MONGO_HOST", cls.hostname),
            port=int(os.getenv("MONGO_PORT", cls.port)),
            db=os.getenv("MONGO_DB", cls.db),
            username=os.getenv("MONGO_USERNAME", cls.username),
            password=os.getenv("MONGO_PASSWORD", cls.password),
        )


def build_mongo_uri(options: DatabaseOptions) -> str:
    if options.username == "":
        return f"mongodb://{options.hostname}:{options.port}"
    username = quote_plus(options.username)
    password = quote_plus(options.password)
    return f"mongodb://{username}:{password}@{options.hostname}:{options.port}"


def connect_to_db(options: DatabaseOptions) -> AsyncMongoClient:
    # The client connects lazily on the first operation.
    logger.info(f"Connecting to MongoDB at {options.hostname}:{options.port}/{options.db}")
    return AsyncMongoClient(build_mongo_uri(options))


async def disconnect_from_db(client: AsyncMongoClient):
    await client.close()
    logger.info("Disconnected from MongoDB")
