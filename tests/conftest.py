import copy
import itertools
from collections import defaultdict

import pytest
from fastapi.testclient import TestClient

from config import Settings
from context import AppContext
from exceptions import StoreUnavailable, UploadError
from main import create_app
from services.firestore import utc_now


class InMemoryFirestore:
    """Stores documents in dictionaries, mirroring the FirestoreDB method surface"""

    def __init__(self):
        self.collections = defaultdict(dict)
        self.unavailable = False
        self._ids = itertools.count(1)

    def _check(self):
        if self.unavailable:
            raise StoreUnavailable()

    def insert(self, collection, data):
        self._check()
        doc_id = f"{collection}-{next(self._ids)}"
        now = utc_now()
        self.collections[collection][doc_id] = {**copy.deepcopy(data), "created_at": now, "updated_at": now}
        return self.get(collection, doc_id)

    def get(self, collection, doc_id):
        self._check()
        document = self.collections[collection].get(doc_id)
        if document is None:
            return None
        return {**copy.deepcopy(document), "id": doc_id}

    def get_many(self, collection, doc_ids):
        self._check()
        found = {}
        for doc_id in doc_ids:
            document = self.get(collection, doc_id) if doc_id else None
            if document is not None:
                found[doc_id] = document
        return found

    def list_all(self, collection):
        self._check()
        return [self.get(collection, doc_id) for doc_id in reversed(list(self.collections[collection]))]

    def find_containing(self, collection, field, value):
        return [doc for doc in self.list_all(collection) if value in doc.get(field, [])]

    def update(self, collection, doc_id, fields):
        self._check()
        document = self.collections[collection].get(doc_id)
        if document is None:
            return None
        document.update(copy.deepcopy(fields))
        document["updated_at"] = utc_now()
        return self.get(collection, doc_id)

    def add_to_array(self, collection, doc_id, field, *values):
        self._check()
        document = self.collections[collection].get(doc_id)
        if document is None:
            return None
        array = document.setdefault(field, [])
        for value in values:
            if value not in array:
                array.append(copy.deepcopy(value))
        return self.update(collection, doc_id, {})

    def remove_from_array(self, collection, doc_id, field, *values):
        self._check()
        document = self.collections[collection].get(doc_id)
        if document is None:
            return None
        document[field] = [item for item in document.get(field, []) if item not in values]
        return self.update(collection, doc_id, {})

    def delete(self, collection, doc_id):
        self._check()
        return self.collections[collection].pop(doc_id, None) is not None


class RecordingStorage:
    """Media storage that keeps uploads in memory"""

    def __init__(self):
        self.uploads = []
        self.deleted = []
        self.fail = False

    async def upload_file(self, file, folder="media"):
        try:
            content = await file.read()
            if self.fail:
                raise UploadError()
            url = f"https://media.test/{folder}/{len(self.uploads) + 1}-{file.filename}"
            self.uploads.append((url, content))
            return url
        finally:
            await file.close()

    def delete_file(self, url):
        self.deleted.append(url)
        return True


@pytest.fixture
def store():
    return InMemoryFirestore()


@pytest.fixture
def storage():
    return RecordingStorage()


@pytest.fixture
def settings():
    return Settings(bcrypt_rounds=4, cors_origins=["http://testserver"])


@pytest.fixture
def client(settings, store, storage):
    app = create_app(settings, lambda s: AppContext.wire(s, store, storage))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(client):
    def _make(username="alice", **fields):
        payload = {"username": username, "email": f"{username}@example.com", "password": "secret", **fields}
        response = client.post("/api/user", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["user"]

    return _make


@pytest.fixture
def make_post(client):
    def _make(author_id, title="Hello", content="First post", files=None, **fields):
        data = {"title": title, "content": content, "author": author_id, **fields}
        response = client.post("/api/user/post", data=data, files=files)
        assert response.status_code == 201, response.text
        return response.json()["post"]

    return _make
