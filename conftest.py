# conftest.py
"""
pytest 공용 fixture.

실제 Firestore 대신 메모리 기반 FakeFirestore를 사용합니다.
- firebase_admin.firestore.client() -> FakeFirestore
- firebase_admin.firestore.transactional -> 함수 종료 시 commit, 예외 발생 시 쓰기를 버리는 래퍼
"""

import copy
import uuid

import pytest
from firebase_admin import firestore


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentReference:
    def __init__(self, db, collection_name, doc_id):
        self._db = db
        self._collection_name = collection_name
        self.id = doc_id

    @property
    def _key(self):
        return (self._collection_name, self.id)

    def get(self, transaction=None):
        self._db.read_count += 1
        self._db.reads.append(self._key)
        return FakeSnapshot(self, copy.deepcopy(self._db.store.get(self._key)))

    def set(self, data, merge=False):
        self._db._apply_set(self._key, data, merge)

    def update(self, data):
        self._db._apply_update(self._key, data)

    def delete(self):
        self._db.store.pop(self._key, None)


class FakeQuery:
    def __init__(self, db, collection_name):
        self._db = db
        self._collection_name = collection_name
        self._filters = []
        self._order = None
        self._limit = None

    def _clone(self):
        clone = FakeQuery(self._db, self._collection_name)
        clone._filters = list(self._filters)
        clone._order = self._order
        clone._limit = self._limit
        return clone

    def where(self, field, op, value):
        clone = self._clone()
        clone._filters.append((field, op, value))
        return clone

    def order_by(self, field, direction=None):
        clone = self._clone()
        clone._order = (field, direction)
        return clone

    def limit(self, count):
        clone = self._clone()
        clone._limit = count
        return clone

    @staticmethod
    def _matches(data, field, op, value):
        current = data.get(field)
        if op == '==':
            return current == value
        if op == 'array_contains':
            return isinstance(current, list) and value in current
        if op == 'in':
            return current in value
        if op == '>=':
            return current is not None and current >= value
        if op == '<=':
            return current is not None and current <= value
        raise NotImplementedError(op)

    def stream(self):
        results = []
        for (coll, doc_id), data in list(self._db.store.items()):
            if coll != self._collection_name:
                continue
            if all(self._matches(data, f, op, v) for f, op, v in self._filters):
                results.append((doc_id, data))
        if self._order:
            field, direction = self._order
            results.sort(key=lambda item: item[1].get(field), reverse=(direction == firestore.Query.DESCENDING))
        if self._limit is not None:
            results = results[:self._limit]
        for doc_id, data in results:
            ref = FakeDocumentReference(self._db, self._collection_name, doc_id)
            yield FakeSnapshot(ref, copy.deepcopy(data))

    def get(self):
        return list(self.stream())


class FakeCollection(FakeQuery):
    def document(self, doc_id=None):
        return FakeDocumentReference(self._db, self._collection_name, doc_id or uuid.uuid4().hex)


class FakeTransaction:
    """쓰기를 모아두었다가 commit 시점에 한 번에 반영합니다."""

    def __init__(self, db):
        self._db = db
        self._writes = []

    def set(self, ref, data, merge=False):
        self._writes.append(('set', ref, copy.deepcopy(data), merge))

    def update(self, ref, data):
        self._writes.append(('update', ref, copy.deepcopy(data), None))

    def delete(self, ref):
        self._writes.append(('delete', ref, None, None))

    def commit(self):
        if self._db.fail_next_commit:
            self._db.fail_next_commit = False
            self._writes = []
            raise RuntimeError("simulated commit failure")
        for kind, ref, data, merge in self._writes:
            if kind == 'set':
                ref.set(data, merge=merge)
            elif kind == 'update':
                ref.update(data)
            else:
                ref.delete()
        self._writes = []


class FakeFirestore:
    def __init__(self):
        self.store = {}
        self.read_count = 0
        self.reads = []
        self.fail_next_commit = False

    def collection(self, name):
        return FakeCollection(self, name)

    def transaction(self):
        return FakeTransaction(self)

    # --- 테스트 편의 메서드 ---
    def seed(self, collection_name, doc_id, data):
        self.store[(collection_name, doc_id)] = copy.deepcopy(data)

    def data(self, collection_name, doc_id):
        return copy.deepcopy(self.store.get((collection_name, doc_id)))

    def documents(self, collection_name):
        return {doc_id: copy.deepcopy(data) for (coll, doc_id), data in self.store.items() if coll == collection_name}

    def _apply_set(self, key, data, merge):
        if merge and key in self.store:
            merged = self.store[key]
            merged.update(copy.deepcopy(data))
        else:
            self.store[key] = copy.deepcopy(data)

    def _apply_update(self, key, data):
        if key not in self.store:
            raise LookupError(f"No document to update: {key}")
        self.store[key].update(copy.deepcopy(data))


def fake_transactional(func):
    def wrapper(transaction, *args, **kwargs):
        result = func(transaction, *args, **kwargs)
        transaction.commit()
        return result
    return wrapper


@pytest.fixture
def fake_db(monkeypatch):
    db = FakeFirestore()
    monkeypatch.setattr(firestore, 'client', lambda *args, **kwargs: db)
    monkeypatch.setattr(firestore, 'transactional', fake_transactional)
    return db


@pytest.fixture
def seed_user(fake_db):
    """users 컬렉션에 기본 필드를 갖춘 프로필을 저장하는 헬퍼"""
    from skatespot.models.user_profile import UserProfile

    def _seed(user_id, display_name="", email=None, **overrides):
        profile = UserProfile.new(display_name, email).to_firestore()
        profile.update(overrides)
        fake_db.seed('users', user_id, profile)
        return profile

    return _seed


@pytest.fixture
def app(fake_db, monkeypatch):
    monkeypatch.setenv('FLASK_ENV', 'testing')
    from skatespot import create_app
    flask_app = create_app('testing')
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    """user_id로 access token을 발급해 Authorization 헤더를 만드는 헬퍼"""
    from flask_jwt_extended import create_access_token

    def _headers(user_id):
        with app.app_context():
            token = create_access_token(identity=user_id)
        return {"Authorization": f"Bearer {token}"}

    return _headers
