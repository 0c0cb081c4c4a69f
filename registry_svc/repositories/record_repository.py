"""
Repository for the records collection.

All MongoDB access is encapsulated here - no driver calls in the service or
API layers. Driver errors are logged and returned inside InsertResult /
FindResult rather than raised, so a failing database never fails a request.
"""
import logging
from typing import Any, Dict, List, Mapping

from bson.errors import BSONError
from pymongo.errors import PyMongoError

from core.exceptions import InsertError, QueryError
from models.results import FindResult, InsertResult
from repositories.base import DocumentStore

logger = logging.getLogger(__name__)


class RecordRepository:
    """
    Insert and read operations over the one shared records collection.

    It should be instantiated via core.dependencies.get_record_repository().
    """

    def __init__(self, store: DocumentStore):
        """
        Args:
            store: Connected document store.
                   Injected via core.dependencies.get_record_repository().
        """
        self._store = store
        self._collection = store.collection

    def insert(self, document: Mapping[str, Any]) -> InsertResult:
        """
        Append one document. No deduplication and no schema check.

        Args:
            document: Field mapping to store. It is copied, so the driver's
                      generated ``_id`` is not written back into the caller's dict.

        Returns:
            InsertResult: inserted id as a string, or the error.
        """
        try:
            result = self._collection.insert_one(dict(document))
        except PyMongoError as e:
            logger.error(
                "Insert failed",
                extra={"collection": self._store.collection_name, "error": str(e)}
            )
            return InsertResult(
                error=InsertError(collection=self._store.collection_name, reason=str(e))
            )

        inserted_id = str(result.inserted_id)
        logger.debug("Document inserted", extra={"inserted_id": inserted_id})
        return InsertResult(inserted_id=inserted_id)

    def find_all(self) -> FindResult:
        """
        Read every document in store-native order.

        No filtering or paging. The cursor is drained before returning; if
        the read fails partway, the documents read so far are returned along
        with the error. A stored document that cannot be decoded ends the
        read the same way.
        """
        documents: List[Dict[str, Any]] = []
        try:
            with self._collection.find({}) as cursor:
                for document in cursor:
                    documents.append(dict(document))
        except (PyMongoError, BSONError) as e:
            logger.error(
                "Find failed",
                extra={
                    "collection": self._store.collection_name,
                    "documents_read": len(documents),
                    "error": str(e),
                }
            )
            return FindResult(
                documents=documents,
                error=QueryError(collection=self._store.collection_name, reason=str(e)),
            )

        return FindResult(documents=documents)

    def count(self) -> int:
        """
        Number of documents in the collection.

        Raises:
            PyMongoError: If the count cannot be read.
        """
        return self._collection.count_documents({})
