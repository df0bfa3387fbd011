import functools
import logging
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional, Iterable

import firebase_admin
from firebase_admin import firestore as fs
from google.api_core import exceptions as google_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1 import FieldFilter

from exceptions import StoreUnavailable

logger = logging.getLogger(__name__)

POSTS = "posts"
USERS = "users"


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def store_call(method):
    """Translate Firestore client failures into StoreUnavailable"""
    @functools.wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except google_exceptions.GoogleAPIError as e:
            logger.error("Firestore %s failed: %s", method.__name__, e, exc_info=True)
            raise StoreUnavailable() from e

    return wrapper


class FirestoreDB:
    def __init__(self, app: firebase_admin.App):
        self.db = fs.client(app)

    def collection(self, name: str):
        return self.db.collection(name)

    @staticmethod
    def _to_dict(snapshot) -> Dict[str, Any]:
        data = snapshot.to_dict() or {}
        data["id"] = snapshot.id
        return data

    @store_call
    def insert(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a document with a generated ID and store-managed timestamps"""
        doc_ref = self.collection(collection).document()
        now = utc_now()
        document = {**data, "created_at": now, "updated_at": now}
        doc_ref.set(document)
        return {**document, "id": doc_ref.id}

    @store_call
    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Get a document by ID, or None if it does not exist"""
        snapshot = self.collection(collection).document(doc_id).get()
        if not snapshot.exists:
            return None
        return self._to_dict(snapshot)

    @store_call
    def get_many(self, collection: str, doc_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
        """
        Batch fetch documents by ID
        Returns a dictionary mapping IDs to documents; missing documents are left out
        """
        unique_ids = list(dict.fromkeys(doc_id for doc_id in doc_ids if doc_id))
        if not unique_ids:
            return {}

        refs = [self.collection(collection).document(doc_id) for doc_id in unique_ids]
        return {
            snapshot.id: self._to_dict(snapshot)
            for snapshot in self.db.get_all(refs)
            if snapshot.exists
        }

    @store_call
    def list_all(self, collection: str) -> List[Dict[str, Any]]:
        """Get all documents sorted by creation date descending"""
        docs = self.collection(collection).order_by(
            "created_at", direction=firestore.Query.DESCENDING
        ).stream()
        return [self._to_dict(doc) for doc in docs]

    @store_call
    def find_containing(self, collection: str, field: str, value: Any) -> List[Dict[str, Any]]:
        """Get all documents whose array `field` contains `value`"""
        docs = self.collection(collection).where(
            filter=FieldFilter(field, "array_contains", value)
        ).stream()
        return [self._to_dict(doc) for doc in docs]

    @store_call
    def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Partially update a document

        Returns:
            The updated document, or None if no document has this ID
        """
        doc_ref = self.collection(collection).document(doc_id)
        try:
            doc_ref.update({**fields, "updated_at": utc_now()})
        except google_exceptions.NotFound:
            return None
        return self._to_dict(doc_ref.get())

    def add_to_array(self, collection: str, doc_id: str, field: str, *values) -> Optional[Dict[str, Any]]:
        """Atomically add values to an array field, skipping values already present"""
        return self.update(collection, doc_id, {field: firestore.ArrayUnion(list(values))})

    def remove_from_array(self, collection: str, doc_id: str, field: str, *values) -> Optional[Dict[str, Any]]:
        """Atomically remove every occurrence of values from an array field"""
        return self.update(collection, doc_id, {field: firestore.ArrayRemove(list(values))})

    @store_call
    def delete(self, collection: str, doc_id: str) -> bool:
        """Delete a document; returns False if it did not exist"""
        doc_ref = self.collection(collection).document(doc_id)
        if not doc_ref.get().exists:
            return False
        doc_ref.delete()
        return True
