"""
Document store connection management.

This module owns the single long-lived MongoDB client used by the service.
MongoClient keeps its own connection pool and is safe to share between the
worker threads that serve requests.

IMPORTANT: DocumentStore instantiation should be done through the DI layer.
Use core.dependencies.get_document_store() instead of connecting directly.
"""
import logging
from typing import Any

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from core.exceptions import DatabaseConnectionError

logger = logging.getLogger(__name__)


class DocumentStore:
    """
    MongoDB client bound to the one collection holding every record.

    Usage:
        # Via dependency injection (recommended):
        from core.dependencies import get_document_store
        store = get_document_store()

        # Direct construction (for testing):
        store = DocumentStore(client=fake_client, collection=fake_collection)
    """

    def __init__(self, client: Any, collection: Collection):
        """
        Args:
            client: Connected MongoClient (used for ping and close).
            collection: Collection that records are read from and written to.
        """
        self._client = client
        self.collection = collection

    @property
    def collection_name(self) -> str:
        return getattr(self.collection, "full_name", None) or self.collection.name

    @classmethod
    def connect(
        cls,
        uri: str,
        username: str = "",
        password: str = "",
        database: str = "petri_dish",
        collection: str = "patients",
        server_selection_timeout_ms: int = 5000,
    ) -> "DocumentStore":
        """
        Connect to MongoDB and verify the server answers a ping.

        Credentials are passed only when a username is given; otherwise
        whatever the URI carries is used.

        Raises:
            DatabaseConnectionError: If the client cannot be created or the ping fails.
        """
        options = {"serverSelectionTimeoutMS": server_selection_timeout_ms}
        if username:
            options["username"] = username
            options["password"] = password

        client = None
        try:
            client = MongoClient(uri, **options)
            client.admin.command("ping")
        except PyMongoError as e:
            if client is not None:
                client.close()
            raise DatabaseConnectionError(
                database=database,
                collection=collection,
                reason=str(e),
            ) from e

        logger.info(
            "Connected to MongoDB",
            extra={"database": database, "collection": collection}
        )
        return cls(client=client, collection=client[database][collection])

    def ping(self) -> None:
        """
        Round-trip to the server.

        Raises:
            PyMongoError: If the server cannot be reached.
        """
        self._client.admin.command("ping")

    def close(self) -> None:
        """Close the client and its connection pool."""
        self._client.close()
        logger.info("MongoDB client closed")
