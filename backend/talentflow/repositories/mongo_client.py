"""MongoDB Client - Connection, Collection and Transaction Management"""
from typing import Any, Callable, Dict, Optional, TypeVar
from pymongo import MongoClient as PyMongoClient
from pymongo import ASCENDING, DESCENDING, ReadPreference
from pymongo.client_session import ClientSession
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, PyMongoError
from pymongo.read_concern import ReadConcern
from pymongo.write_concern import WriteConcern

from ..config.settings import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Global client instance
_client: Optional[PyMongoClient] = None
_database: Optional[Database] = None


def get_client() -> PyMongoClient:
    """Get or create MongoDB client"""
    global _client
    if _client is None:
        logger.info(f"Connecting to MongoDB: {settings.mongo_uri}")
        _client = PyMongoClient(
            settings.mongo_uri,
            tz_aware=True,
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=5000,
            socketTimeoutMS=30000,
        )
        # Test connection
        try:
            _client.admin.command("ping")
            logger.info("MongoDB connection successful")
        except ConnectionFailure as e:
            logger.error(f"MongoDB connection failed: {e}")
            raise
    return _client


def get_database() -> Database:
    """Get the application database"""
    global _database
    if _database is None:
        client = get_client()
        _database = client[settings.mongo_db]
        logger.info(f"Using database: {settings.mongo_db}")
    return _database


def get_collection(name: str) -> Collection:
    """Get a collection from the database"""
    return get_database()[name]


def close_connection() -> None:
    """Close MongoDB connection"""
    global _client, _database
    if _client is not None:
        _client.close()
        _client = None
        _database = None
        logger.info("MongoDB connection closed")


def run_in_transaction(callback: Callable[[ClientSession], T]) -> T:
    """
    Run callback inside a multi-document transaction

    The callback receives the session and must pass it to every read and
    write. Transient errors (e.g. write conflicts with a concurrent
    transaction) make pymongo re-run the callback from scratch; any other
    exception aborts the transaction and propagates unchanged.
    """
    client = get_client()
    with client.start_session() as session:
        return session.with_transaction(
            callback,
            read_concern=ReadConcern("snapshot"),
            write_concern=WriteConcern("majority"),
            read_preference=ReadPreference.PRIMARY,
            max_commit_time_ms=settings.transaction_timeout_ms,
        )


def create_indexes() -> None:
    """Create all required indexes"""
    db = get_database()
    logger.info("Creating MongoDB indexes...")

    # Job posts collection
    job_posts = db["job_posts"]
    job_posts.create_index("job_post_id", unique=True)
    job_posts.create_index([("tenant_id", ASCENDING), ("status", ASCENDING)])
    job_posts.create_index("created_by.actor_id")
    job_posts.create_index("updated_at", background=True)
    job_posts.create_index([("status", ASCENDING), ("created_at", DESCENDING)])

    # Applications collection
    applications = db["job_applications"]
    applications.create_index("application_id", unique=True)
    applications.create_index(
        [("candidate_id", ASCENDING), ("job_post_id", ASCENDING)],
        unique=True
    )
    applications.create_index([("job_post_id", ASCENDING), ("status", ASCENDING)])
    applications.create_index([("candidate_id", ASCENDING), ("application_date", DESCENDING)])

    # Audit records collection
    audit_records = db["audit_records"]
    audit_records.create_index("audit_record_id", unique=True)
    audit_records.create_index(
        [("entity_kind", ASCENDING), ("entity_id", ASCENDING), ("sequence", DESCENDING)],
        unique=True
    )
    audit_records.create_index(
        [("entity_kind", ASCENDING), ("entity_id", ASCENDING), ("timestamp", DESCENDING)]
    )

    logger.info("MongoDB indexes created successfully")


def health_check() -> Dict[str, Any]:
    """Check MongoDB health"""
    try:
        client = get_client()
        client.admin.command("ping")
        return {
            "status": "healthy",
            "database": settings.mongo_db,
            "connection": "ok"
        }
    except PyMongoError as e:
        logger.error(f"MongoDB health check failed: {e}")
        return {
            "status": "unhealthy",
            "database": settings.mongo_db,
            "error": str(e)
        }
